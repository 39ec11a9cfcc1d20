"""
Tools for writing an observation matrix as a nexus file
"""
from phydata.reader import NexusFormatException

TEMPLATE = """
#NEXUS
%(comments)s

BEGIN TAXA;
\tTITLE Taxa;
\tDIMENSIONS NTAX=%(ntax)d;
\tTAXLABELS
%(taxlabels)s
\t;
END;

BEGIN CHARACTERS;
\tTITLE 'Phylogenetic data matrix';
\tDIMENSIONS NCHAR=%(nchar)d;
\tFORMAT DATATYPE = STANDARD RESPECTCASE GAP = %(gap)s MISSING = %(missing)s SYMBOLS = "%(symbols)s";
%(charblock)s\tMATRIX
%(matrix)s
\t;
END;
"""

SYMBOLS = '0123456789ABCDEF'
UNSAFE = set('\'"[](){};,/=')
RESERVED = frozenset(['begin', 'end', 'endblock'])


def quote(label, force=False):
    """
    Returns `label` with blanks as underscores, quoted if it contains
    nexus punctuation, is a block keyword, or if `force` is set.

    >>> quote('Ascaphus truei')
    'Ascaphus_truei'
    >>> quote('ribs, fusion')
    "'ribs,_fusion'"
    >>> quote("it's", force=True)
    "'it''s'"
    >>> quote('End')
    "'End'"
    """
    label = "_".join(label.split())
    if force or UNSAFE.intersection(label) or label.lower() in RESERVED:
        return "'%s'" % label.replace("'", "''")
    return label


class NexusWriter:

    MISSING = '?'
    GAP = '-'

    def __init__(self, matrix):
        self.matrix = matrix
        self.comments = []

    def add_comment(self, comment):
        """Adds a `comment` into the nexus file"""
        self.comments.append(comment)

    def _make_comments(self):
        return "\n".join(["[%s]" % c for c in self.comments])

    def _states(self):
        """Returns the sorted valid states of each character"""
        states = {}
        for char in self.matrix.chars():
            states[char] = self.matrix.states(char)
            if len(states[char]) > len(SYMBOLS):
                raise NexusFormatException(
                    "character %r has %d states, nexus matrices support up to %d"
                    % (char, len(states[char]), len(SYMBOLS)))
        return states

    def _make_charlabel_block(self, states):
        """Generates a character state labels command"""
        chars = self.matrix.chars()
        if not chars:
            return ''
        out = []
        for i, char in enumerate(chars, 1):
            label = "\t\t%d %s" % (i, quote(char, force=True))
            if states[char]:
                label += " / " + " ".join(quote(s, force=True) for s in states[char])
            out.append(label)
        return "\tCHARSTATELABELS\n" + ",\n".join(out) + " ;\n"

    def cell(self, taxon, char, states):
        """
        Encodes the observations of a taxon for a character.

        The states of all the specimens of the taxon are pooled. With no
        state the cell is `-` if any specimen is not applicable, or `?`
        otherwise; a single state is its index in `states`, and several
        states are a polymorphism, e.g. `{01}`.
        """
        pool, not_applicable = self.matrix.taxon_states(taxon, char)
        if not pool:
            return self.GAP if not_applicable else self.MISSING
        value = "".join(SYMBOLS[i] for i, s in enumerate(states) if s in pool)
        if len(value) > 1:
            value = "{%s}" % value
        return value

    def _make_matrix_block(self, states):
        out = []
        chars = self.matrix.chars()
        for taxon in self.matrix.taxa():
            row = [self.cell(taxon, c, states[c]) for c in chars]
            out.append("\t%s\t%s" % (quote(taxon), "".join(row)))
        return "\n".join(out)

    def make_nexus(self):
        """
        Generates a string representation of the nexus

        :return: String
        :raises NexusFormatException: if a character has too many states.
        """
        states = self._states()
        taxa = self.matrix.taxa()
        return TEMPLATE.strip() % {
            'comments': self._make_comments(),
            'ntax': len(taxa),
            'taxlabels': "\n".join("\t\t%s" % quote(t) for t in taxa),
            'nchar': len(states),
            'gap': self.GAP,
            'missing': self.MISSING,
            'symbols': " ".join(SYMBOLS),
            'charblock': self._make_charlabel_block(states),
            'matrix': self._make_matrix_block(states),
        } + "\n"

    def write(self):
        return self.make_nexus()

    def write_to_file(self, filename="output.nex"):
        """
        Writes the nexus to a file.

        :param filename: Filename to store nexus as
        :type filename: String

        :return: None
        """
        with open(filename, 'w', encoding='utf-8') as handle:
            handle.write(self.make_nexus())


def write_nexus(matrix):
    """Returns an observation matrix as nexus text."""
    return NexusWriter(matrix).make_nexus()
