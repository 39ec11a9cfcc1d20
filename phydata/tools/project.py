"""
Project files: the paths of the datasets of a project
"""
import csv
import datetime

from phydata.tools.tables import TableFormatError

HOMOLOGUES = 'homologues'
OBSERVATIONS = 'observations'
DNA = 'dna'

HEADER = ['dataset', 'path']


class ProjectError(TableFormatError):
    """A malformed project file"""


class Project(object):
    """
    A collection of paths for particular datasets.

    >>> p = Project()
    >>> p.add(OBSERVATIONS, 'observations.tab')
    ''
    >>> p.path(OBSERVATIONS)
    'observations.tab'
    """
    def __init__(self):
        self.paths = {}

    @classmethod
    def read(cls, filename):
        """
        Reads a project from a tab-delimited file with the fields
        `dataset` and `path`.

        :raises IOError: If file reading fails.
        :raises ProjectError: If the file is malformed.
        """
        p = cls()
        header = None
        with open(filename, encoding='utf-8') as handle:
            for number, line in enumerate(handle, 1):
                if line.startswith('#') or not line.strip():
                    continue
                row = next(csv.reader([line], delimiter='\t'))
                if header is None:
                    header = [h.strip().lower() for h in row]
                    for field in HEADER:
                        if field not in header:
                            raise ProjectError("on file %r: expecting field %r" % (filename, field), number)
                    continue
                record = dict(zip(header, row))
                if 'path' not in record:
                    raise ProjectError("on file %r: missing path" % filename, number)
                p.paths[record['dataset']] = record['path']
        return p

    def add(self, dataset, path):
        """
        Sets the path of a dataset, an empty path removes the dataset.

        :return: the previous path of the dataset.
        """
        prev = self.paths.get(dataset, '')
        if not path:
            self.paths.pop(dataset, None)
        else:
            self.paths[dataset] = path
        return prev

    def path(self, dataset):
        return self.paths.get(dataset, '')

    def sets(self):
        return sorted(self.paths)

    def write(self, filename):
        with open(filename, 'w', encoding='utf-8', newline='') as handle:
            handle.write("# phydata project files\n")
            handle.write("# data saved on: %s\n" % datetime.datetime.now().astimezone().isoformat(timespec='seconds'))
            tab = csv.writer(handle, delimiter='\t', lineterminator='\r\n')
            tab.writerow(HEADER)
            for dataset in self.sets():
                tab.writerow([dataset, self.paths[dataset]])
