"""
DNA sequences of taxon specimens
"""
import enum

from phydata.normalize import canon, fold, fold_key, format_sequence, specimen_id


class SequenceError(ValueError):
    """A sequence that can not be placed in a collection"""


class Field(enum.Enum):
    """Additional information fields of a sequence"""
    ALIGNED = 'aligned'
    PROTEIN = 'protein'
    ORGANELLE = 'organelle'
    REFERENCE = 'reference'
    COMMENTS = 'comments'


class Sequence(object):
    """A sequence stored under a GenBank accession"""
    __slots__ = ('bases', 'aligned', 'protein', 'organelle', 'reference', 'comments')

    def __init__(self, bases):
        self.bases = bases
        self.aligned = False
        self.protein = False
        self.organelle = ''
        self.reference = ''
        self.comments = ''

    def __len__(self):
        return len(self.bases)

    def __repr__(self):
        return "<Sequence: %d bases>" % len(self.bases)


class Specimen(object):
    def __init__(self, taxon, name):
        self.taxon = taxon
        self.name = name
        # gene -> accession -> Sequence
        self.genes = {}


class DNACollection(object):
    """
    A collection of taxa and their sequences.

    Sequences are addressed by specimen, gene and GenBank accession:

    >>> c = DNACollection()
    >>> c.add('Papio anubis', '', 'cytb', 'KU871221', 'ATGACC CCAATA')
    >>> c.specimens()
    ['genbank:ku871221']
    >>> c.sequence('genbank:ku871221', 'cytb', 'KU871221')
    'atgaccccaata'
    """

    def __init__(self):
        self._specimens = {}

    def add(self, taxon, spec, gene, genbank, bases):
        """
        Adds a sequence for a specimen of a taxon.

        If no specimen is given, the identifier "genbank:<accession>" is
        used. If no accession is given, the sequence is stored under
        "no-gb:<specimen>". A record with an empty taxon is ignored.

        :param taxon: taxon name
        :type taxon: string
        :param spec: specimen identifier, can be empty
        :type spec: string
        :param gene: gene or molecule identifier
        :type gene: string
        :param genbank: GenBank accession, can be empty
        :type genbank: string
        :param bases: the sequence, aligned or unaligned
        :type bases: string

        :return: None
        :raises SequenceError: if the sequence has neither specimen nor
            accession, or if it has no gene.
        """
        taxon = canon(taxon)
        if not taxon:
            return

        genbank = genbank.strip()
        spec = specimen_id(spec)
        if not spec and not genbank:
            raise SequenceError("sequence without identifier")
        if not spec:
            spec = specimen_id("genbank:" + genbank)
        if not genbank:
            genbank = "no-gb:" + spec

        gene = fold_key(gene)
        if not gene:
            raise SequenceError(
                "sequence %r without a defined gene-molecule identifier" % genbank)

        sp = self._specimens.get(spec)
        if sp is None:
            sp = self._specimens[spec] = Specimen(taxon, spec)
        sp.genes.setdefault(gene, {})[genbank] = Sequence(format_sequence(bases))

    def _sequence(self, spec, gene, genbank):
        sp = self._specimens.get(specimen_id(spec))
        if sp is None:
            return None
        return sp.genes.get(fold_key(gene), {}).get(genbank.strip())

    def sequence(self, spec, gene, genbank):
        """Returns the bases of a sequence, or an empty string."""
        seq = self._sequence(spec, gene, genbank)
        if seq is None:
            return ''
        return seq.bases

    def set(self, spec, gene, genbank, value, field):
        """
        Sets an additional information `field` of a sequence.

        `aligned` and `protein` are true only for the value "true".
        """
        field = Field(field)
        seq = self._sequence(spec, gene, genbank)
        if seq is None:
            return
        value = fold(value)
        if field in (Field.ALIGNED, Field.PROTEIN):
            value = value.lower() == 'true'
        elif field == Field.ORGANELLE:
            value = value.lower()
        setattr(seq, field.value, value)

    def val(self, spec, gene, genbank, field):
        field = Field(field)
        seq = self._sequence(spec, gene, genbank)
        if seq is None:
            return ''
        value = getattr(seq, field.value)
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return value

    def genbank(self):
        """Returns every accession in the collection."""
        ids = set()
        for sp in self._specimens.values():
            for accessions in sp.genes.values():
                ids.update(accessions)
        return sorted(ids)

    def genes(self):
        names = set()
        for sp in self._specimens.values():
            names.update(sp.genes)
        return sorted(names)

    def gene_accession(self, spec, gene):
        """Returns the accessions of a gene in a specimen."""
        sp = self._specimens.get(specimen_id(spec))
        if sp is None:
            return []
        return sorted(sp.genes.get(fold_key(gene), {}))

    def spec_gene(self, spec):
        """Returns the genes sequenced for a specimen."""
        sp = self._specimens.get(specimen_id(spec))
        if sp is None:
            return []
        return sorted(sp.genes)

    def max_len(self, gene):
        """Returns the length of the longest sequence of a gene."""
        gene = fold_key(gene)
        longest = 0
        for sp in self._specimens.values():
            for seq in sp.genes.get(gene, {}).values():
                longest = max(longest, len(seq))
        return longest

    def specimens(self):
        return sorted(self._specimens)

    def taxa(self):
        return sorted(set(sp.taxon for sp in self._specimens.values()))

    def taxon_specimens(self, taxon):
        taxon = canon(taxon)
        return sorted(sp.name for sp in self._specimens.values() if sp.taxon == taxon)

    def taxon(self, spec):
        """Returns the taxon of a specimen, or an empty string."""
        sp = self._specimens.get(specimen_id(spec))
        return sp.taxon if sp is not None else ''

    def __repr__(self):
        return "<DNACollection: %d genes from %d specimens>" % (
            len(self.genes()), len(self._specimens))
