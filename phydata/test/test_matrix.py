"""Tests for the observation matrix"""
import unittest
from phydata.matrix import ObservationMatrix, Field, Special, special_state, NOT_APPLICABLE, UNKNOWN


class Test_SpecialStates(unittest.TestCase):
    def test_values(self):
        assert NOT_APPLICABLE == '<na>'
        assert UNKNOWN == '<unknown>'

    def test_special_state(self):
        assert special_state('<na>') is Special.NOT_APPLICABLE
        assert special_state('<unknown>') is Special.UNKNOWN
        assert special_state('present') is None


class Test_ObservationMatrix_Add(unittest.TestCase):
    def setUp(self):
        self.m = ObservationMatrix()

    def test_names_are_normalised(self):
        self.m.add(' bufonidae ', 'Bufonidae:Kluge69', 'Tail  Muscle', 'ABSENT')
        assert self.m.taxa() == ['Bufonidae']
        assert self.m.specimens() == ['bufonidae:kluge69']
        assert self.m.chars() == ['tail muscle']
        assert self.m.obs('BUFONIDAE:kluge69', 'tail muscle') == ['absent']
        assert self.m.taxon_specimens('BUFONIDAE') == ['bufonidae:kluge69']
        assert self.m.taxon('bufonidae:kluge69') == 'Bufonidae'

    def test_empty_fields_are_ignored(self):
        self.m.add('', 'sp', 'tail muscle', 'absent')
        self.m.add('Bufonidae', ' ', 'tail muscle', 'absent')
        self.m.add('Bufonidae', 'sp', '', 'absent')
        self.m.add('Bufonidae', 'sp', 'tail muscle', '')
        assert self.m.chars() == []
        assert self.m.specimens() == []

    def test_polymorphism(self):
        self.m.add('Pipidae', 'sp', 'pectoral girdle', 'finnisternal')
        self.m.add('Pipidae', 'sp', 'pectoral girdle', 'arciferal')
        assert self.m.obs('sp', 'pectoral girdle') == ['arciferal', 'finnisternal']

    def test_not_applicable_replaces(self):
        self.m.add('Pipidae', 'sp', 'ribs, fusion', 'free')
        self.m.add('Pipidae', 'sp', 'ribs, fusion', 'fused')
        self.m.add('Pipidae', 'sp', 'ribs, fusion', '<NA>')
        assert self.m.obs('sp', 'ribs, fusion') == [NOT_APPLICABLE]

    def test_concrete_replaces_not_applicable(self):
        self.m.add('Pipidae', 'sp', 'ribs, fusion', '<na>')
        self.m.add('Pipidae', 'sp', 'ribs, fusion', 'free')
        assert self.m.obs('sp', 'ribs, fusion') == ['free']

    def test_unknown_removes(self):
        self.m.add('Pipidae', 'sp', 'ribs, fusion', 'free')
        self.m.add('Pipidae', 'sp', 'ribs, fusion', '<unknown>')
        assert self.m.obs('sp', 'ribs, fusion') == [UNKNOWN]
        # the character and its states are kept
        assert self.m.chars() == ['ribs, fusion']
        assert self.m.states('ribs, fusion') == ['free']

    def test_unknown_creates_character(self):
        self.m.add('Pipidae', 'sp', 'tail muscle', '<unknown>')
        assert self.m.chars() == ['tail muscle']
        assert self.m.states('tail muscle') == []
        assert self.m.specimens() == ['sp']

    def test_states_hide_not_applicable(self):
        self.m.add('Pipidae', 'sp1', 'ribs, fusion', '<na>')
        self.m.add('Ranidae', 'sp2', 'ribs, fusion', 'fused')
        self.m.add('Bufonidae', 'sp3', 'ribs, fusion', 'free')
        assert self.m.states('ribs, fusion') == ['free', 'fused']
        assert self.m.states('unknown character') == []

    def test_specimen_keeps_first_taxon(self):
        self.m.add('Pipidae', 'sp', 'tail muscle', 'absent')
        self.m.add('Ranidae', 'sp', 'tail muscle', 'present')
        assert self.m.taxa() == ['Pipidae']
        assert self.m.obs('sp', 'tail muscle') == ['absent']
        # the state is still recorded in the character
        assert self.m.states('tail muscle') == ['absent', 'present']

    def test_unknown_lookups(self):
        assert self.m.obs('nobody', 'tail muscle') == [UNKNOWN]
        assert self.m.taxon('nobody') == ''
        assert self.m.taxon_specimens('Nobody') == []


class Test_ObservationMatrix_Fields(unittest.TestCase):
    def setUp(self):
        self.m = ObservationMatrix()
        self.m.add('Ascaphidae', 'ascaphidae:kluge69', 'tail muscle', 'present')

    def test_set_and_val(self):
        self.m.set('ascaphidae:kluge69', 'tail muscle', 'present', ' kluge1969 ', Field.REFERENCE)
        self.m.set('ascaphidae:kluge69', 'tail muscle', 'present', 'ascaphus-tail.png', Field.IMAGE)
        self.m.set('Ascaphidae:Kluge69', 'Tail Muscle', 'PRESENT', 'not   homologous', 'comments')
        assert self.m.val('ascaphidae:kluge69', 'tail muscle', 'present', Field.REFERENCE) == 'kluge1969'
        assert self.m.val('ascaphidae:kluge69', 'tail muscle', 'present', Field.IMAGE) == 'ascaphus-tail.png'
        assert self.m.val('ascaphidae:kluge69', 'tail muscle', 'present', Field.COMMENTS) == 'not homologous'

    def test_missing_observation(self):
        self.m.set('ascaphidae:kluge69', 'tail muscle', 'absent', 'kluge1969', Field.REFERENCE)
        assert self.m.val('ascaphidae:kluge69', 'tail muscle', 'absent', Field.REFERENCE) == ''
        assert self.m.val('nobody', 'tail muscle', 'present', Field.REFERENCE) == ''

    def test_invalid_field(self):
        with self.assertRaises(ValueError):
            self.m.set('ascaphidae:kluge69', 'tail muscle', 'present', 'x', 'colour')

    def test_new_observation_resets_fields(self):
        self.m.set('ascaphidae:kluge69', 'tail muscle', 'present', 'kluge1969', Field.REFERENCE)
        self.m.add('Ascaphidae', 'ascaphidae:kluge69', 'tail muscle', 'present')
        assert self.m.val('ascaphidae:kluge69', 'tail muscle', 'present', Field.REFERENCE) == ''


class Test_ObservationMatrix_TaxonStates(unittest.TestCase):
    def setUp(self):
        self.m = ObservationMatrix()
        self.m.add('Pipidae', 'sp1', 'pectoral girdle', 'arciferal')
        self.m.add('Pipidae', 'sp2', 'pectoral girdle', 'finnisternal')
        self.m.add('Pipidae', 'sp3', 'pectoral girdle', '<na>')
        self.m.add('Ranidae', 'sp4', 'pectoral girdle', '<na>')

    def test_pool(self):
        pool, not_applicable = self.m.taxon_states('Pipidae', 'pectoral girdle')
        assert pool == set(['arciferal', 'finnisternal'])
        assert not_applicable

    def test_not_applicable(self):
        pool, not_applicable = self.m.taxon_states('Ranidae', 'pectoral girdle')
        assert pool == set()
        assert not_applicable

    def test_unknown(self):
        pool, not_applicable = self.m.taxon_states('Ranidae', 'tail muscle')
        assert pool == set()
        assert not not_applicable
