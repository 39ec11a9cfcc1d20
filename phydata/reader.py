"""
Tools for reading a nexus file into an observation matrix
"""
import collections
import gzip
import logging
import os
import string
import warnings

from phydata.matrix import ObservationMatrix, Field, NOT_APPLICABLE, UNKNOWN
from phydata.normalize import canon, fold, specimen_id

log = logging.getLogger(__name__)

DELIMITERS = ';,/='
QUOTES = '\'"'
HEXDIGITS = frozenset(string.hexdigits)
POLYMORPHISM = {'(': ')', '{': '}'}


class NexusFormatException(Exception):
    """Generic Exception for Nexus Format Errors"""
    def __init__(self, arg, line=None):
        Exception.__init__(self, arg)
        self.value = arg
        self.line = line

    def __str__(self):
        if self.line is None:
            return str(self.value)
        return "line %d: %s" % (self.line, self.value)


# `delimiter` is the punctuation that ended the token (one of DELIMITERS),
# ' ' if it was whitespace, or '' at the end of the file.
Token = collections.namedtuple('Token', ['text', 'delimiter', 'quoted'])


class Tokenizer(object):
    """
    Splits nexus text into tokens.

    A token is either a quoted run (quotes are doubled to include them in
    the token) or an unquoted run ended by whitespace or by one of
    `DELIMITERS`. Whitespace and [comments] between tokens are skipped.

    >>> t = Tokenizer("1 'pectoral_girdle' / 'it''s' absent, 2 x;")
    >>> t.next_token()
    Token(text='1', delimiter=' ', quoted=False)
    >>> t.next_token()
    Token(text='pectoral_girdle', delimiter='/', quoted=True)
    >>> t.next_token()
    Token(text="it's", delimiter=' ', quoted=True)
    >>> t.next_token()
    Token(text='absent', delimiter=',', quoted=False)
    """
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1

    def error(self, message):
        return NexusFormatException(message, self.line)

    def peek(self):
        """Returns the next character without consuming it, None at the end"""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def read_char(self):
        """
        Consumes the next character.

        :raises NexusFormatException: at the end of the text.
        """
        if self.pos >= len(self.text):
            raise self.error("unexpected end of file")
        c = self.text[self.pos]
        self.pos += 1
        if c == '\n':
            self.line += 1
        return c

    def unread(self):
        self.pos -= 1
        if self.text[self.pos] == '\n':
            self.line -= 1

    def skip_comment(self):
        """Skips a comment, the opening bracket is already consumed"""
        start = self.line
        while True:
            if self.peek() is None:
                raise NexusFormatException("unterminated comment", start)
            if self.read_char() == ']':
                return

    def skip_spaces(self, strict=True):
        """
        Skips whitespace and comments.

        :param strict: raise at the end of the text (otherwise just stop)
        :type strict: Boolean
        """
        while True:
            c = self.peek()
            if c is None:
                if strict:
                    raise self.error("unexpected end of file")
                return
            if c == '[':
                self.read_char()
                self.skip_comment()
            elif c.isspace():
                self.read_char()
            else:
                return

    def next_token(self):
        """
        Reads the next token.

        :return: Token
        :raises NexusFormatException: at the end of the text, or inside
            an unterminated quoted token.
        """
        self.skip_spaces()
        c = self.read_char()
        if c in QUOTES:
            token = Token(self._quoted(c), ' ', True)
        else:
            self.unread()
            text, delimiter = self._unquoted()
            token = Token(text, delimiter, False)
        if token.delimiter == ' ':
            # the delimiter can be separated from the token by whitespace
            self.skip_spaces(strict=False)
            c = self.peek()
            if c is not None and c in DELIMITERS:
                self.read_char()
                token = token._replace(delimiter=c)
        return token

    def _quoted(self, stop):
        start = self.line
        out = []
        while True:
            if self.peek() is None:
                raise NexusFormatException("unterminated quoted token", start)
            c = self.read_char()
            if c == stop:
                if self.peek() != stop:
                    return "".join(out)
                self.read_char()
            out.append(c)

    def _unquoted(self):
        out = []
        while True:
            c = self.peek()
            if c is None:
                return "".join(out), ''
            if c.isspace() or c == '[':
                return "".join(out), ' '
            self.read_char()
            if c in DELIMITERS:
                return "".join(out), c
            out.append(c)

    def skip_definition(self, token):
        """Skips the rest of a command, up to its terminating semicolon"""
        while token.delimiter != ';':
            token = self.next_token()

    def skip_block(self):
        """Skips tokens up to the end of the current block"""
        while True:
            token = self.next_token()
            if not token.quoted and token.text.lower() in ('end', 'endblock'):
                return


def _label(text):
    """Nexus labels use underscores for blanks"""
    return fold(text.replace('_', ' '))


class NexusCharacter(object):
    """A character as defined in a characters block"""
    def __init__(self, name, states=None):
        self.name = name
        self.states = states or []

    def state(self, index):
        """Returns the name of the state at `index`"""
        if index < len(self.states) and self.states[index]:
            return self.states[index]
        return "state %d" % index

    def __repr__(self):
        return "<NexusCharacter: %s (%d states)>" % (self.name, len(self.states))


class CharactersHandler(object):
    """
    Handler for `characters` blocks.

    Cells read from the matrix are staged in `cells` as
    (taxon, specimen, character, state, reference) tuples and only added
    to a matrix by `apply`.
    """
    def __init__(self, tokens, reference):
        self.tokens = tokens
        self.reference = reference
        self.characters = []
        self.cells = []
        self.nchar = None

    def parse(self):
        """
        Parses the block up to its END (or ENDBLOCK) command.

        :raises NexusFormatException: If parsing fails
        """
        while True:
            token = self.tokens.next_token()
            command = token.text.lower()
            if command in ('end', 'endblock'):
                return
            parser = self.commands.get(command)
            if parser is None:
                log.debug("skipping command %r", command)
                self.tokens.skip_definition(token)
                continue
            parser(self, token)

    def apply(self, matrix):
        for taxon, spec, char, state, ref in self.cells:
            matrix.add(taxon, spec, char, state)
            if ref is not None:
                matrix.set(spec, char, state, ref, Field.REFERENCE)

    def _index(self, token, expected, command):
        try:
            index = int(token.text)
        except ValueError:
            raise self.tokens.error(
                "while reading %s: char %d [%r]: not a number" % (command, expected, token.text))
        if index != expected:
            raise self.tokens.error(
                "while reading %s: char %d [%r]: expecting %d" % (command, expected, token.text, expected))

    def _state_names(self):
        """Reads state labels up to the end of a character definition"""
        states = []
        while True:
            token = self.tokens.next_token()
            states.append(_label(token.text))
            if token.delimiter in (',', ';'):
                return states, token.delimiter

    def parse_dimensions(self, token):
        while token.delimiter != ';':
            token = self.tokens.next_token()
            if token.text.lower() == 'nchar' and token.delimiter == '=':
                token = self.tokens.next_token()
                try:
                    self.nchar = int(token.text)
                except ValueError:
                    raise self.tokens.error("invalid NCHAR value %r" % token.text)

    def parse_charstatelabels(self, token):
        """
        Parses character names and their state names:

            CHARSTATELABELS 1 'tail_muscle' / absent present, 2 ...;
        """
        characters = []
        delimiter = token.delimiter
        while delimiter != ';':
            self._index(self.tokens.next_token(), len(characters) + 1, 'char state labels')
            token = self.tokens.next_token()
            char = NexusCharacter(_label(token.text))
            characters.append(char)
            delimiter = token.delimiter
            if delimiter in (',', ';'):
                continue
            if delimiter != '/':
                raise self.tokens.error(
                    "while reading char state labels: char %d [%r]: expecting '/' delimiter"
                    % (len(characters), token.text))
            char.states, delimiter = self._state_names()
        self.characters = characters

    def parse_charlabels(self, token):
        characters = []
        delimiter = token.delimiter
        while delimiter != ';':
            token = self.tokens.next_token()
            characters.append(NexusCharacter(_label(token.text)))
            delimiter = token.delimiter
        self.characters = characters

    def parse_statelabels(self, token):
        """
        Parses state names for already defined characters:

            STATELABELS 1 absent present, 2 ...;
        """
        delimiter = token.delimiter
        i = 0
        while delimiter != ';':
            token = self.tokens.next_token()
            if not token.text and token.delimiter == ';':
                break
            i += 1
            self._index(token, i, 'state labels')
            states, delimiter = self._state_names()
            if i <= len(self.characters):
                self.characters[i - 1].states = states

    def parse_matrix(self, token):
        tokens = self.tokens
        if token.delimiter == ';':
            return
        last = None
        while True:
            token = tokens.next_token()
            if not token.text and token.delimiter == ';':
                return
            taxon = canon(_label(token.text))
            spec = specimen_id("%s:%s" % (self.reference, taxon))
            try:
                found = self._parse_row(taxon, spec)
            except NexusFormatException as e:
                if e.line is None:
                    e.line = tokens.line
                raise
            if self.nchar is not None and found != self.nchar:
                warnings.warn("Expected %d characters, got %d for %s" % (self.nchar, found, taxon))
            last = taxon

            try:
                tokens.skip_spaces()
            except NexusFormatException:
                raise tokens.error("while reading matrix: unexpected end of file, last taxon read %r" % last)
            if tokens.peek() == ';':
                tokens.read_char()
                return

    def _parse_row(self, taxon, spec):
        """
        Reads the cells of a taxon, up to the end of the line.

        Cells are not separated, so the row is read by characters:
        `-` is not applicable, `?` is unknown, an hexadecimal digit is a
        state, and digits inside () or {} are a polymorphism.

        :return: the number of cells read
        """
        tokens = self.tokens
        index = 0
        while True:
            if tokens.peek() is None:
                raise tokens.error("while reading matrix: taxon %r: unexpected end of file" % taxon)
            c = tokens.read_char()
            if c in '\n\r':
                return index
            if c == ';':
                tokens.unread()
                return index
            if c.isspace():
                continue
            if c == '[':
                tokens.skip_comment()
                continue

            if index < len(self.characters):
                char = self.characters[index]
            else:
                char = NexusCharacter("char %d" % (index + 1))
            index += 1

            if c == '-':
                self.cells.append((taxon, spec, char.name, NOT_APPLICABLE, self.reference))
            elif c == '?':
                self.cells.append((taxon, spec, char.name, UNKNOWN, None))
            elif c in POLYMORPHISM:
                self._parse_polymorphism(taxon, spec, char, index, POLYMORPHISM[c])
            else:
                self._add_state(taxon, spec, char, index, c)

    def _parse_polymorphism(self, taxon, spec, char, index, close):
        tokens = self.tokens
        empty = True
        while True:
            if tokens.peek() is None:
                raise tokens.error("while reading matrix: taxon %r: char %d: unexpected end of file" % (taxon, index))
            c = tokens.read_char()
            if c == close:
                break
            if c.isspace():
                continue
            self._add_state(taxon, spec, char, index, c)
            empty = False
        if empty:
            raise tokens.error("while reading matrix: taxon %r: char %d: empty polymorph" % (taxon, index))

    def _add_state(self, taxon, spec, char, index, c):
        if c not in HEXDIGITS:
            raise self.tokens.error("while reading matrix: taxon %r: char %d [%r]: invalid state" % (taxon, index, c))
        state = char.state(int(c, 16))
        self.cells.append((taxon, spec, char.name, state, self.reference))

    def __repr__(self):
        return "<NexusCharactersBlock: %d characters>" % len(self.characters)

    commands = {
        'dimensions': parse_dimensions,
        'charstatelabels': parse_charstatelabels,
        'charlabels': parse_charlabels,
        'statelabels': parse_statelabels,
        'matrix': parse_matrix,
    }


class NexusReader(object):
    """
    A nexus reader.

    Only the first `characters` (or `data`) block is read, any other
    block is ignored. Specimens are named after the reference and the
    taxon, e.g. "kluge1969:ascaphus_truei".
    """
    def __init__(self, matrix=None):
        if matrix is None:
            matrix = ObservationMatrix()
        self.matrix = matrix
        self.handlers = {
            'characters': CharactersHandler,
            'data': CharactersHandler,
        }

    def read_file(self, filename, reference):
        """
        Loads and Parses a Nexus File

        :param filename: filename of a nexus file
        :type filename: string
        :param reference: reference ID used as prefix of the specimens
        :type reference: string

        :raises IOError: If file reading fails.
        :raises NexusFormatException: If parsing fails.

        :return: ObservationMatrix
        """
        self.filename = filename
        if not os.path.isfile(filename):
            raise IOError("Unable To Read File %s" % filename)

        if filename.endswith('.gz'):
            handle = gzip.open(filename, 'rt', encoding='utf-8')
        else:
            handle = open(filename, encoding='utf-8')
        with handle:
            return self._read(handle.read(), reference)

    def read_string(self, contents, reference):
        """
        Loads and Parses a Nexus from a string

        :param contents: string containing a nexus to parse
        :type contents: string

        :return: ObservationMatrix
        """
        self.filename = "<String>"
        return self._read(contents, reference)

    def _read(self, text, reference):
        tokens = Tokenizer(text)

        try:
            token = tokens.next_token()
        except NexusFormatException as e:
            raise NexusFormatException("expecting '#nexus' header: %s" % e.value, e.line)
        if token.text.lower() != '#nexus':
            raise tokens.error("got %r, expecting '#nexus' header" % token.text)

        while True:
            try:
                token = tokens.next_token()
            except NexusFormatException as e:
                raise NexusFormatException("expecting 'begin' token: %s" % e.value, e.line)
            if token.text.lower() != 'begin':
                raise tokens.error("got %r, expecting 'begin' block" % token.text)
            block = tokens.next_token().text.lower()
            if block in self.handlers:
                break
            log.debug("skipping block %r", block)
            try:
                tokens.skip_block()
            except NexusFormatException as e:
                raise NexusFormatException("incomplete block %r: %s" % (block, e.value), e.line)

        handler = self.handlers[block](tokens, reference)
        handler.parse()
        handler.apply(self.matrix)
        log.debug("read %d cells from %s", len(handler.cells), self.filename)
        return self.matrix


def read_nexus(source, reference, matrix=None):
    """
    Reads a character matrix from nexus text or an open handle.

    :param source: nexus text (str or utf-8 bytes) or file-like object
    :param reference: reference ID used as prefix of the specimens
    :param matrix: matrix to fill, a new one if None

    :return: ObservationMatrix
    """
    if hasattr(source, 'read'):
        source = source.read()
    if isinstance(source, bytes):
        source = source.decode('utf-8')
    return NexusReader(matrix).read_string(source, reference)
