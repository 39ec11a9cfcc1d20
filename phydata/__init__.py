"""
phydata - phylogenetic character data for python
================================================

Observations
------------

An observation matrix stores the character states of taxon specimens:

>>> from phydata import ObservationMatrix
>>> m = ObservationMatrix()
>>> m.add('Pipidae', 'kluge1969:pipidae', 'pectoral girdle', 'arciferal')
>>> m.add('Pipidae', 'kluge1969:pipidae', 'pectoral girdle', 'finnisternal')
>>> m.add('Ranidae', 'kluge1969:ranidae', 'pectoral girdle', 'finnisternal')
>>> m.add('Ranidae', 'kluge1969:ranidae', 'tail muscle', '<na>')

>>> m.taxa()
['Pipidae', 'Ranidae']
>>> m.states('pectoral girdle')
['arciferal', 'finnisternal']
>>> m.obs('kluge1969:ranidae', 'tail muscle')
['<na>']

Nexus files
-----------

>>> from phydata import NexusWriter, read_nexus
>>> text = NexusWriter(m).make_nexus()
>>> other = read_nexus(text, 'kluge1969')
>>> other.obs('kluge1969:pipidae', 'pectoral girdle')
['arciferal', 'finnisternal']

DNA sequences
-------------

>>> from phydata import DNACollection
>>> c = DNACollection()
>>> c.add('Pipidae', 'kluge1969:pipidae', 'cytb', 'AB000001', 'acgt acgt')
>>> c.max_len('cytb')
8

Matrices
--------

>>> from phydata import MatrixExporter
>>> print(MatrixExporter(m, c).tnt()) #doctest: +SKIP
"""
from phydata.matrix import ObservationMatrix, NOT_APPLICABLE, UNKNOWN
from phydata.dna import DNACollection, SequenceError
from phydata.reader import NexusReader, NexusFormatException, read_nexus
from phydata.writer import NexusWriter, write_nexus
from phydata.export import MatrixExporter

__version__ = "0.1"
PACKAGE_NAME = "phydata"
PACKAGE_VERSION = __version__
VERSION = __version__
PACKAGE_LICENSE = "BSD-2-Clause"
