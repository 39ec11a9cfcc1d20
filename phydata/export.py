"""
Builds TNT and nexus data matrices from observations and DNA sequences
"""
import logging

import numpy

log = logging.getLogger(__name__)

TNT_HEADER = "mxram 250 ;\ntaxname +255 ;\nxread %d %d\n\n"
TNT_FOOTER = ";\n\ncc - . ;\n\nproc /; \n"

# TNT numeric blocks use the digits only
MAX_STATES = 10

# nucleotide equivalents of IUPAC codes, used to pick the most
# informative sequence of a taxon
WEIGHTS = numpy.zeros(256)
for _codes, _weight in (('acgtu', 1.0), ('mrwsyk', 0.5), ('vhdb', 0.25)):
    WEIGHTS[[ord(c) for c in _codes]] = _weight


def count_nucleotides(seq):
    """
    Returns the number of nucleotides in a (lowercase) sequence,
    ambiguity codes count as a fraction of a nucleotide.

    >>> count_nucleotides('acgt')
    4.0
    >>> count_nucleotides('acnr-?')
    2.5
    """
    if not seq:
        return 0.0
    codes = numpy.frombuffer(seq.encode('ascii', 'replace'), dtype=numpy.uint8)
    return float(WEIGHTS[codes].sum())


def tnt_name(taxon):
    """Taxon names for TNT: blanks are underscores"""
    return "_".join(taxon.split())


def nexus_name(taxon):
    """
    Taxon names for nexus matrices.

    >>> nexus_name('Smith & Jones "sp." nov')
    'Smith_Jones_sp._nov'
    """
    return tnt_name(taxon.replace('&', '').replace('"', ''))


class MatrixExporter(object):
    """
    Builds a phylogenetic data matrix.

    :param matrix: observations, can be None
    :type matrix: ObservationMatrix
    :param collection: DNA sequences, can be None
    :type collection: DNACollection
    :param taxa: the terminals of the matrix, in order, default all taxa
    :type taxa: list
    :param chars: the characters of the matrix, in order, default all
        characters
    :type chars: list
    """
    def __init__(self, matrix=None, collection=None, taxa=None, chars=None):
        self.matrix = matrix
        self.collection = collection
        self.taxa = list(taxa or [])
        self.chars = list(chars or [])

    def _sources(self):
        return [s for s in (self.matrix, self.collection) if s is not None]

    def taxon_list(self):
        if self.taxa:
            return self.taxa
        taxa = set()
        for source in self._sources():
            taxa.update(source.taxa())
        return sorted(taxa)

    def char_list(self):
        if self.matrix is None:
            return []
        if self.chars:
            return self.chars
        return self.matrix.chars()

    @property
    def ntaxa(self):
        return len(self.taxon_list())

    @property
    def nmorph(self):
        return len(self.char_list())

    @property
    def ndna(self):
        if self.collection is None:
            return 0
        return sum(self.collection.max_len(g) for g in self.collection.genes())

    @property
    def nchar(self):
        return self.nmorph + self.ndna

    def symbols(self):
        """
        Assigns a digit to the first states of each character, states
        beyond the digits have no symbol.
        """
        out = {}
        for char in self.char_list():
            out[char] = self.matrix.states(char)[:MAX_STATES]
        return out

    def cell(self, taxon, char, states, brackets):
        pool, not_applicable = self.matrix.taxon_states(taxon, char)
        if not pool:
            return '-' if not_applicable else '?'
        digits = ["%d" % i for i, s in enumerate(states) if s in pool]
        if len(pool) > 1:
            return brackets[0] + "".join(digits) + brackets[1]
        return "".join(digits[:1])

    def best_sequence(self, taxon, gene):
        """
        Returns the sequence with most nucleotides among all specimens
        and accessions of a taxon, ties keep the first sequence found.
        """
        best, weight = '', 0.0
        for spec in self.collection.taxon_specimens(taxon):
            for acc in self.collection.gene_accession(spec, gene):
                seq = self.collection.sequence(spec, gene, acc)
                w = count_nucleotides(seq)
                if w > weight:
                    best, weight = seq, w
        return best

    def tnt(self):
        """
        Returns the matrix in TNT format.

        Observations go in a `&[num]` block and each gene in a
        `&[dna nogaps]` block.
        """
        out = [TNT_HEADER % (self.nchar, self.ntaxa)]
        if self.matrix is not None:
            out.append("&[num]\n")
            symbols = self.symbols()
            chars = self.char_list()
            for taxon in (self.taxa or self.matrix.taxa()):
                row = [self.cell(taxon, c, symbols[c], '[]') for c in chars]
                out.append("%s\t%s\n" % (tnt_name(taxon), "".join(row)))
            out.append("\n")

        if self.collection is not None:
            for gene in self.collection.genes():
                out.append("&[dna nogaps]\n")
                for taxon in (self.taxa or self.collection.taxa()):
                    seq = self.best_sequence(taxon, gene)
                    if not seq:
                        continue
                    out.append("%s\t%s\n" % (tnt_name(taxon), seq))
                out.append("\n")

        out.append(TNT_FOOTER)
        log.debug("TNT matrix: %d taxa, %d characters", self.ntaxa, self.nchar)
        return "".join(out)

    def format_line(self):
        nmorph, nchar = self.nmorph, self.nchar
        if nmorph and self.ndna:
            return "\tFormat datatype=mixed(standard:1-%d,DNA:%d-%d) interleave=yes gap=- missing=?;\n\n" % (
                nmorph, nmorph + 1, nchar)
        if nmorph:
            return "\tFormat datatype=standard missing=?;\n\n"
        return "\tFormat datatype=DNA interleave=yes gap=- missing=?;\n\n"

    def nexus(self):
        """
        Returns the matrix in nexus format.

        The data is interleaved: the observations come first, then a
        block for each gene. Taxa without a sequence for a gene are
        filled with missing data.
        """
        taxa = self.taxon_list()
        out = ["#NEXUS\n\n", "Begin data;\n"]
        out.append("\tDimensions ntax=%d nchar=%d;\n" % (len(taxa), self.nchar))
        out.append(self.format_line())
        out.append("\tMatrix\n\n")

        if self.matrix is not None:
            out.append("[Morphology]\n")
            symbols = self.symbols()
            chars = self.char_list()
            for taxon in taxa:
                row = [self.cell(taxon, c, symbols[c], '{}') for c in chars]
                out.append("%s\t%s\n" % (nexus_name(taxon), "".join(row)))
            out.append("\n")

        if self.collection is not None:
            for gene in self.collection.genes():
                out.append("[%s]\n" % gene)
                size = self.collection.max_len(gene)
                for taxon in taxa:
                    seq = self.best_sequence(taxon, gene) or '?' * size
                    out.append("%s\t%s\n" % (nexus_name(taxon), seq))
                out.append("\n")

        out.append("\t;\n\nEnd;\n")
        log.debug("nexus matrix: %d taxa, %d characters", len(taxa), self.nchar)
        return "".join(out)

    def write(self, handle, fmt='tnt'):
        """
        Writes the matrix to an open `handle`.

        :param fmt: 'tnt' or 'nexus'
        :raises ValueError: on an unknown format
        """
        fmt = fmt.lower()
        if fmt == 'tnt':
            handle.write(self.tnt())
        elif fmt == 'nexus':
            handle.write(self.nexus())
        else:
            raise ValueError("unknown format %r" % fmt)
