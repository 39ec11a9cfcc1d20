#!/usr/bin/env python
import argparse
import datetime
import logging
import os
import sys

from phydata import DNACollection, VERSION
from phydata.tools import Project, TableFormatError, read_sequences, write_sequences
from phydata.tools.project import DNA

__doc__ = """phydata_dna - phydata tools v%(version)s

Manages the DNA sequences of a project.
""" % {'version': VERSION}

log = logging.getLogger('phydata_dna')

DEFAULT_FILE = 'dna.tab'


def load_sequences(filename, collection=None):
    """
    Reads a sequence table, a missing file gives an empty collection.

    :return: DNACollection
    """
    if collection is None:
        collection = DNACollection()
    if not os.path.exists(filename):
        return collection
    with open(filename, encoding='utf-8') as handle:
        try:
            read_sequences(handle, collection)
        except TableFormatError as e:
            raise TableFormatError("on file %r: %s" % (filename, e.value), e.row)
    return collection


def save_sequences(filename, collection):
    with open(filename, 'w', encoding='utf-8', newline='') as handle:
        handle.write("# phydata: DNA sequences\n")
        handle.write("# data saved on: %s\n" % datetime.datetime.now().astimezone().isoformat(timespec='seconds'))
        write_sequences(handle, collection)


def run_add(args):
    project = Project()
    if os.path.exists(args.project):
        project = Project.read(args.project)
    dnafile = args.file or project.path(DNA) or DEFAULT_FILE
    collection = load_sequences(dnafile)

    if not os.path.isfile(args.input):
        raise IOError("Unable To Read File %s" % args.input)
    load_sequences(args.input, collection)
    log.debug("%r: %d specimens, %d genes", dnafile, len(collection.specimens()), len(collection.genes()))

    save_sequences(dnafile, collection)
    project.add(DNA, dnafile)
    project.write(args.project)


def run_taxa(args):
    project = Project.read(args.project)
    path = project.path(DNA)
    collection = load_sequences(path) if path else DNACollection()
    for taxon in collection.taxa():
        print(taxon)


def build_parser():
    parser = argparse.ArgumentParser(prog='phydata_dna', description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        default=False, help="Print debugging information")
    commands = parser.add_subparsers(dest="command")
    commands.required = True

    add = commands.add_parser("add", help="add DNA sequences to a project")
    add.add_argument("-f", "--file", dest="file", default="",
                     help="sequence file, by default the project's or %s" % DEFAULT_FILE)
    add.add_argument("project", help="project file")
    add.add_argument("input", help="tab-delimited sequences")
    add.set_defaults(run=run_add)

    taxa = commands.add_parser("taxa", help="list the taxa with sequences")
    taxa.add_argument("project", help="project file")
    taxa.set_defaults(run=run_taxa)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s")
    try:
        args.run(args)
    except (IOError, TableFormatError) as e:
        print("phydata_dna: %s" % e, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
