#!/usr/bin/env python
import argparse
import datetime
import logging
import os
import sys

from phydata import ObservationMatrix, NexusReader, NexusFormatException, VERSION
from phydata.tools import Project, TableFormatError, read_observations, write_observations
from phydata.tools.project import OBSERVATIONS

__doc__ = """phydata_obs - phydata tools v%(version)s

Manages the specimen observations of a project.
""" % {'version': VERSION}

log = logging.getLogger('phydata_obs')

DEFAULT_FILE = 'observations.tab'


def load_observations(filename, matrix=None):
    """
    Reads an observation table, a missing file gives an empty matrix.

    :return: ObservationMatrix
    """
    if matrix is None:
        matrix = ObservationMatrix()
    if not os.path.exists(filename):
        return matrix
    with open(filename, encoding='utf-8') as handle:
        try:
            read_observations(handle, matrix)
        except TableFormatError as e:
            raise TableFormatError("on file %r: %s" % (filename, e.value), e.row)
    return matrix


def save_observations(filename, matrix):
    with open(filename, 'w', encoding='utf-8', newline='') as handle:
        handle.write("# phydata: specimen observations\n")
        handle.write("# data saved on: %s\n" % datetime.datetime.now().astimezone().isoformat(timespec='seconds'))
        write_observations(handle, matrix)


def run_add(args):
    project = Project()
    if os.path.exists(args.project):
        project = Project.read(args.project)
    obsfile = args.file or project.path(OBSERVATIONS) or DEFAULT_FILE
    matrix = load_observations(obsfile)

    if args.nexus:
        NexusReader(matrix).read_file(args.input, args.nexus)
    else:
        if not os.path.isfile(args.input):
            raise IOError("Unable To Read File %s" % args.input)
        load_observations(args.input, matrix)
    log.debug("%r: %d specimens, %d characters", obsfile, len(matrix.specimens()), len(matrix.chars()))

    save_observations(obsfile, matrix)
    project.add(OBSERVATIONS, obsfile)
    project.write(args.project)


def _project_matrix(filename):
    project = Project.read(filename)
    path = project.path(OBSERVATIONS)
    if not path:
        return ObservationMatrix()
    return load_observations(path)


def run_chars(args):
    for char in _project_matrix(args.project).chars():
        print(char)


def run_taxa(args):
    for taxon in _project_matrix(args.project).taxa():
        print(taxon)


def build_parser():
    parser = argparse.ArgumentParser(prog='phydata_obs', description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        default=False, help="Print debugging information")
    commands = parser.add_subparsers(dest="command")
    commands.required = True

    add = commands.add_parser("add", help="add observations to a project")
    add.add_argument("-f", "--file", dest="file", default="",
                     help="observations file, by default the project's or %s" % DEFAULT_FILE)
    add.add_argument("--nexus", dest="nexus", default="", metavar="REF",
                     help="read the input as a nexus file, with REF as the reference of its specimens")
    add.add_argument("project", help="project file")
    add.add_argument("input", help="tab-delimited observations, or a nexus file")
    add.set_defaults(run=run_add)

    chars = commands.add_parser("chars", help="list the characters of a project")
    chars.add_argument("project", help="project file")
    chars.set_defaults(run=run_chars)

    taxa = commands.add_parser("taxa", help="list the taxa with observations")
    taxa.add_argument("project", help="project file")
    taxa.set_defaults(run=run_taxa)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s")
    try:
        args.run(args)
    except (IOError, TableFormatError, NexusFormatException) as e:
        print("phydata_obs: %s" % e, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
