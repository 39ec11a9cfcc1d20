"""
Lists of names (taxa or characters) used to order a matrix
"""
from phydata.normalize import canon, fold_key


def read_list(filename):
    """
    Reads a list of names, one per line. Blank lines and lines starting
    with '#' are ignored. Names are returned lowercased, in file order.

    :param filename: filename of the list
    :type filename: string

    :return: List
    :raises IOError: If file reading fails.
    """
    names = []
    with open(filename, encoding='utf-8') as handle:
        for line in handle:
            name = fold_key(line)
            if not name or name.startswith('#'):
                continue
            names.append(name)
    return names


def read_taxa(filename):
    """Reads a list of taxon names, in their canonical form."""
    return [canon(name.replace('_', ' ')) for name in read_list(filename)]
