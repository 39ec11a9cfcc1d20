#!/usr/bin/env python
import argparse
import logging
import sys

from phydata import MatrixExporter, VERSION
from phydata.bin.phydata_dna import load_sequences
from phydata.bin.phydata_obs import load_observations
from phydata.tools import Project, TableFormatError, read_list, read_taxa
from phydata.tools.project import DNA, OBSERVATIONS

__doc__ = """phydata_matrix - phydata tools v%(version)s

Builds a phylogenetic data matrix from the datasets of a project.
""" % {'version': VERSION}

log = logging.getLogger('phydata_matrix')

DATASETS = {'obs': OBSERVATIONS, 'dna': DNA}


def build_matrix(project, datasets, taxa=None, chars=None):
    """
    Builds an exporter with the requested datasets of a project.

    :param project: the project
    :type project: Project
    :param datasets: 'obs' and/or 'dna'
    :type datasets: list

    :return: MatrixExporter
    """
    matrix, collection = None, None
    if 'obs' in datasets:
        path = project.path(OBSERVATIONS)
        if not path:
            raise IOError("project without %s dataset" % OBSERVATIONS)
        matrix = load_observations(path)
    if 'dna' in datasets:
        path = project.path(DNA)
        if not path:
            raise IOError("project without %s dataset" % DNA)
        collection = load_sequences(path)
    return MatrixExporter(matrix, collection, taxa=taxa, chars=chars)


def build_parser():
    parser = argparse.ArgumentParser(prog='phydata_matrix', description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        default=False, help="Print debugging information")
    parser.add_argument("-f", "--format", dest="format", default="tnt",
                        choices=["tnt", "nexus"], help="output format (default: tnt)")
    parser.add_argument("-o", "--output", dest="output", default="",
                        help="output file, by default the standard output")
    parser.add_argument("--taxa", dest="taxa", default="",
                        help="file with the taxa of the matrix, one per line")
    parser.add_argument("--chars", dest="chars", default="",
                        help="file with the characters of the matrix, one per line")
    parser.add_argument("project", help="project file")
    parser.add_argument("datasets", nargs="+", choices=sorted(DATASETS),
                        help="datasets included in the matrix")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s")
    try:
        taxa = read_taxa(args.taxa) if args.taxa else None
        chars = read_list(args.chars) if args.chars else None
        exporter = build_matrix(Project.read(args.project), args.datasets, taxa, chars)
        log.debug("matrix with %d taxa and %d characters", exporter.ntaxa, exporter.nchar)
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as handle:
                exporter.write(handle, args.format)
        else:
            exporter.write(sys.stdout, args.format)
    except (IOError, TableFormatError) as e:
        print("phydata_matrix: %s" % e, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
