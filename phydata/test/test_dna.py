"""Tests for DNA collections"""
import unittest
from phydata.dna import DNACollection, Field, SequenceError


def new_collection():
    c = DNACollection()
    c.add("Loxodonta africana", "sp-01", "cytb", "MN148748", "ccatccaaca tctcagcatg atgaaatttc")
    c.add("Loxodonta africana", "sp-01", "eef1a1", "XM_064288029", "ggtaaactgg gaagtgctgg cgtgtgctgg")
    c.add("Orycteropus afer", "sp-02", "cytb", "OR167429", "??gaccaaca ttcgtaaaac ccaccctctt")
    c.add("Panthera tigris", "FMNH_UN_2485", "cytb", "MH290773 ", "gactcagaca aa---ccatt ccacccatac")
    c.add("Papio anubis", "", "cytb", "KU871221 ", "atgaccccaa tacgcaaatc taatcctatc")
    c.add("Papio anubis", "", "eef1a1", "XM_003897809", "gcagtgagcc gagatcgcgc cactgcaccc")
    c.set("sp-01", "cytb", "MN148748", "true", Field.ALIGNED)
    c.set("sp-01", "cytb", "MN148748", "TRUE", Field.PROTEIN)
    c.set("sp-01", "cytb", "MN148748", "Mitochondrion", Field.ORGANELLE)
    c.set("genbank:KU871221", "cytb", "KU871221", "nucleus", Field.ORGANELLE)
    return c


class Test_DNACollection(unittest.TestCase):
    def setUp(self):
        self.c = new_collection()

    def test_specimens(self):
        assert self.c.specimens() == [
            'fmnh_un_2485', 'genbank:ku871221', 'genbank:xm_003897809', 'sp-01', 'sp-02']

    def test_genes(self):
        assert self.c.genes() == ['cytb', 'eef1a1']

    def test_genbank(self):
        assert self.c.genbank() == [
            'KU871221', 'MH290773', 'MN148748', 'OR167429', 'XM_003897809', 'XM_064288029']

    def test_taxa(self):
        assert self.c.taxa() == ['Loxodonta africana', 'Orycteropus afer', 'Panthera tigris', 'Papio anubis']
        assert self.c.taxon_specimens('papio ANUBIS') == ['genbank:ku871221', 'genbank:xm_003897809']
        assert self.c.taxon('FMNH UN 2485') == 'Panthera tigris'

    def test_sequence(self):
        assert self.c.sequence('sp-01', 'cytb', 'MN148748') == 'ccatccaacatctcagcatgatgaaatttc'
        assert self.c.sequence('fmnh_un_2485', 'cytb', 'MH290773') == 'gactcagacaaa---ccattccacccatac'
        assert self.c.sequence('sp-02', 'cytb', 'OR167429') == '??gaccaacattcgtaaaacccaccctctt'
        assert self.c.sequence('sp-02', 'eef1a1', 'OR167429') == ''
        assert self.c.sequence('nobody', 'cytb', 'OR167429') == ''

    def test_gene_accession(self):
        assert self.c.gene_accession('sp-01', 'cytb') == ['MN148748']
        assert self.c.gene_accession('sp-01', 'rag1') == []
        assert self.c.spec_gene('sp-01') == ['cytb', 'eef1a1']
        assert self.c.spec_gene('nobody') == []

    def test_max_len(self):
        self.c.add("Papio anubis", "sp-03", "cytb", "", "acgt")
        assert self.c.max_len('cytb') == 30
        assert self.c.max_len('rag1') == 0

    def test_metadata(self):
        assert self.c.val('sp-01', 'cytb', 'MN148748', Field.ALIGNED) == 'true'
        assert self.c.val('sp-01', 'cytb', 'MN148748', Field.PROTEIN) == 'true'
        assert self.c.val('sp-01', 'cytb', 'MN148748', Field.ORGANELLE) == 'mitochondrion'
        assert self.c.val('sp-02', 'cytb', 'OR167429', Field.ALIGNED) == 'false'
        assert self.c.val('genbank:ku871221', 'cytb', 'KU871221', Field.ORGANELLE) == 'nucleus'
        assert self.c.val('nobody', 'cytb', 'KU871221', Field.ORGANELLE) == ''

    def test_boolean_fields(self):
        self.c.set('sp-02', 'cytb', 'OR167429', 'yes', Field.ALIGNED)
        assert self.c.val('sp-02', 'cytb', 'OR167429', Field.ALIGNED) == 'false'

    def test_text_fields(self):
        self.c.set('sp-02', 'cytb', 'OR167429', ' a   comment ', Field.COMMENTS)
        self.c.set('sp-02', 'cytb', 'OR167429', 'Arias 2024', Field.REFERENCE)
        assert self.c.val('sp-02', 'cytb', 'OR167429', Field.COMMENTS) == 'a comment'
        assert self.c.val('sp-02', 'cytb', 'OR167429', Field.REFERENCE) == 'Arias 2024'


class Test_DNACollection_Add(unittest.TestCase):
    def setUp(self):
        self.c = DNACollection()

    def test_missing_accession(self):
        self.c.add("Papio anubis", "Sp 03", "cytb", "", "acgt")
        assert self.c.specimens() == ['sp_03']
        assert self.c.genbank() == ['no-gb:sp_03']
        assert self.c.sequence('sp 03', 'cytb', 'no-gb:sp_03') == 'acgt'

    def test_without_identifier(self):
        with self.assertRaises(SequenceError):
            self.c.add("Papio anubis", " ", "cytb", " ", "acgt")

    def test_without_gene(self):
        with self.assertRaises(SequenceError):
            self.c.add("Papio anubis", "sp-01", " ", "KU871221", "acgt")

    def test_sequence_error_is_value_error(self):
        with self.assertRaises(ValueError):
            self.c.add("Papio anubis", "", "", "", "acgt")

    def test_empty_taxon(self):
        self.c.add(" ", "sp-01", "cytb", "KU871221", "acgt")
        assert self.c.specimens() == []

    def test_replace_sequence(self):
        self.c.add("Papio anubis", "sp-01", "cytb", "KU871221", "acgt")
        self.c.set("sp-01", "cytb", "KU871221", "true", Field.ALIGNED)
        self.c.add("Papio anubis", "sp-01", "cytb", "KU871221", "ttgg")
        assert self.c.sequence('sp-01', 'cytb', 'KU871221') == 'ttgg'
        assert self.c.val('sp-01', 'cytb', 'KU871221', Field.ALIGNED) == 'false'

    def test_specimen_keeps_first_taxon(self):
        self.c.add("Papio anubis", "sp-01", "cytb", "KU871221", "acgt")
        self.c.add("Papio hamadryas", "sp-01", "eef1a1", "XM_003897809", "acgt")
        assert self.c.taxa() == ['Papio anubis']
        assert self.c.spec_gene('sp-01') == ['cytb', 'eef1a1']
