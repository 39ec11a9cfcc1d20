"""
Tab-delimited tables of observations and DNA sequences
"""
import csv

from phydata import dna, matrix
from phydata.dna import SequenceError
from phydata.normalize import specimen_id


class TableFormatError(Exception):
    """Generic Exception for malformed tables"""
    def __init__(self, arg, row=None):
        Exception.__init__(self, arg)
        self.value = arg
        self.row = row

    def __str__(self):
        if self.row is None:
            return str(self.value)
        return "on row %d: %s" % (self.row, self.value)


OBSERVATION_FIELDS = ['taxon', 'specimen', 'character', 'state']
OBSERVATION_VALUES = [matrix.Field.REFERENCE, matrix.Field.IMAGE, matrix.Field.COMMENTS]

SEQUENCE_FIELDS = ['taxon', 'specimen', 'gene', 'genbank', 'bases']
SEQUENCE_VALUES = [dna.Field.PROTEIN, dna.Field.ORGANELLE, dna.Field.ALIGNED,
                   dna.Field.REFERENCE, dna.Field.COMMENTS]


def _data_lines(handle, numbers):
    """Yields the lines not starting with '#', appending their line numbers"""
    for number, line in enumerate(handle, 1):
        if line.startswith('#'):
            continue
        numbers.append(number)
        yield line


def _rows(handle, required):
    """
    Yields (row number, record) for each data row of a table.

    Lines starting with '#' are ignored, the first remaining row is the
    header. Quoted fields can span several lines, the row number is the
    line where the row ends. Records are dictionaries keyed by the
    lowercased header.

    :raises TableFormatError: if the header lacks a `required` field or a
        row has fewer fields than the header.
    """
    numbers = []
    header = None
    for row in csv.reader(_data_lines(handle, numbers), delimiter="\t"):
        number = numbers[-1]
        if not any(row):
            continue
        if header is None:
            header = [h.strip().lower() for h in row]
            for field in required:
                if field not in header:
                    raise TableFormatError("expecting field %r" % field, number)
            continue
        if len(row) < len(header):
            raise TableFormatError("expecting %d fields, got %d" % (len(header), len(row)), number)
        yield number, dict(zip(header, row))
    if header is None:
        raise TableFormatError("while reading header: empty table")


def read_observations(handle, obs_matrix):
    """
    Reads specimen observations from a tab-delimited table.

    The table must contain the fields `taxon`, `specimen`, `character`
    and `state`. The optional fields `reference`, `image` and `comments`
    are stored with the observation. Rows with an empty required field
    are ignored.

    :param handle: an open text file
    :param obs_matrix: the matrix to fill
    :type obs_matrix: ObservationMatrix

    :return: None
    :raises TableFormatError: if the table is malformed.
    """
    for number, record in _rows(handle, OBSERVATION_FIELDS):
        taxon, spec, char, state = [record[f] for f in OBSERVATION_FIELDS]
        if not (taxon and spec and char and state):
            continue
        obs_matrix.add(taxon, spec, char, state)
        for field in OBSERVATION_VALUES:
            if field.value in record:
                obs_matrix.set(spec, char, state, record[field.value], field)


def write_observations(handle, obs_matrix):
    """
    Writes an observation matrix as a tab-delimited table, sorted by
    taxon, specimen, character and state.
    """
    tab = csv.writer(handle, delimiter='\t', lineterminator='\r\n')
    tab.writerow(OBSERVATION_FIELDS + [f.value for f in OBSERVATION_VALUES])
    chars = obs_matrix.chars()
    for taxon in obs_matrix.taxa():
        for spec in obs_matrix.taxon_specimens(taxon):
            for char in chars:
                states = obs_matrix.obs(spec, char)
                if states == [matrix.UNKNOWN]:
                    continue
                for state in states:
                    values = [obs_matrix.val(spec, char, state, f) for f in OBSERVATION_VALUES]
                    tab.writerow([taxon, spec, char, state] + values)


def read_sequences(handle, collection):
    """
    Reads DNA sequences from a tab-delimited table.

    The table must contain the fields `taxon`, `specimen`, `gene`,
    `genbank` and `bases`. The optional fields `protein`, `organelle`,
    `aligned`, `reference` and `comments` are stored with the sequence.
    Rows without taxon or bases are ignored.

    :param handle: an open text file
    :param collection: the collection to fill
    :type collection: DNACollection

    :return: None
    :raises TableFormatError: if the table is malformed, or a row can not
        be added to the collection.
    """
    for number, record in _rows(handle, SEQUENCE_FIELDS):
        taxon, spec, gene, genbank, bases = [record[f] for f in SEQUENCE_FIELDS]
        if not (taxon.strip() and bases.strip()):
            continue
        try:
            collection.add(taxon, spec, gene, genbank, bases)
        except SequenceError as e:
            raise TableFormatError(str(e), number)

        # the collection can synthesise both identifiers
        spec = spec if spec.split() else "genbank:" + genbank.strip()
        genbank = genbank if genbank.strip() else "no-gb:" + specimen_id(spec)
        for field in SEQUENCE_VALUES:
            if field.value in record:
                collection.set(spec, gene, genbank, record[field.value], field)


def write_sequences(handle, collection):
    """Writes a DNA collection as a tab-delimited table."""
    tab = csv.writer(handle, delimiter='\t', lineterminator='\r\n')
    tab.writerow(SEQUENCE_FIELDS[:4] + [f.value for f in SEQUENCE_VALUES] + ['bases'])
    genes = collection.genes()
    for taxon in collection.taxa():
        for spec in collection.taxon_specimens(taxon):
            for gene in genes:
                for acc in collection.gene_accession(spec, gene):
                    row = [taxon, spec, gene, acc]
                    row.extend(collection.val(spec, gene, acc, f) for f in SEQUENCE_VALUES)
                    row.append(collection.sequence(spec, gene, acc))
                    tab.writerow(row)
