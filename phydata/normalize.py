"""
Name and field normalisation shared by every data model
"""


def fold(s):
    """
    Collapses whitespace runs to single spaces and trims `s`.

    >>> fold("  ribs,   fusion ")
    'ribs, fusion'

    :param s: string
    :type s: string

    :return: String
    """
    return " ".join(s.split())


def fold_key(s):
    """Folds `s` and lowercases it, for names used as lookup keys."""
    return fold(s).lower()


def canon(name):
    """
    Returns a taxon name in its canonical form: whitespace collapsed,
    lowercased, with only the first letter in upper case.

    >>> canon("  ascaphus   truei ")
    'Ascaphus truei'
    >>> canon("")
    ''

    :param name: taxon name
    :type name: string

    :return: String, empty if `name` has no printable content.
    """
    name = fold_key(name)
    if not name:
        return ""
    first = name[0].upper()
    # keep single code point mappings only (e.g. no 'SS' for a sharp s)
    if len(first) != 1:
        first = name[0]
    return first + name[1:]


def specimen_id(spec):
    """
    Builds a specimen identifier: whitespace runs become underscores and
    the result is lowercased.

    >>> specimen_id("kluge1969:Ascaphus truei")
    'kluge1969:ascaphus_truei'
    """
    return "_".join(spec.split()).lower()


def format_sequence(seq):
    """Removes all whitespace from a sequence and lowercases it."""
    return "".join(seq.split()).lower()
