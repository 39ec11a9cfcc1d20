"""
A matrix of taxon specimens and their character observations
"""
import enum

from phydata.normalize import canon, fold, fold_key


class Special(enum.Enum):
    """Character states that carry no observed state"""
    NOT_APPLICABLE = '<na>'
    UNKNOWN = '<unknown>'


NOT_APPLICABLE = Special.NOT_APPLICABLE.value
UNKNOWN = Special.UNKNOWN.value


def special_state(state):
    """
    Returns the `Special` member for `state`, or None if it is a
    concrete state.

    >>> special_state('<na>')
    <Special.NOT_APPLICABLE: '<na>'>
    >>> special_state('absent') is None
    True
    """
    try:
        return Special(state)
    except ValueError:
        return None


class Field(enum.Enum):
    """Additional information fields of an observation"""
    REFERENCE = 'reference'
    IMAGE = 'image'
    COMMENTS = 'comments'


class Observation(object):
    """A character state assigned to a specimen"""
    __slots__ = ('name', 'reference', 'image', 'comments')

    def __init__(self, name):
        self.name = name
        self.reference = ''  # bibliographic reference
        self.image = ''  # a link to an image
        self.comments = ''

    def __repr__(self):
        return "<Observation: %s>" % self.name


class Character(object):
    """A character and every state observed for it"""

    def __init__(self, name):
        self.name = name
        self.states = set()

    def valid_states(self):
        return sorted(s for s in self.states if s != NOT_APPLICABLE)


class Specimen(object):
    """A specimen (or terminal) of a taxon"""

    def __init__(self, taxon, name):
        self.taxon = taxon
        self.name = name
        # character -> state -> Observation
        self.obs = {}

    def add(self, char, state):
        """
        Adds `state` to the observations of `char`, following the merge
        rules of the special states:

        - `<unknown>` removes every observation of the character.
        - `<na>` replaces the observations with itself.
        - a concrete state replaces a `<na>` observation, and is added to
          any other set of states (i.e. a polymorphism).
        """
        kind = special_state(state)
        if kind is Special.UNKNOWN:
            self.obs.pop(char, None)
            return
        observed = self.obs.get(char, {})
        if kind is Special.NOT_APPLICABLE or _is_no_observation(observed):
            observed = {}
        observed[state] = Observation(state)
        self.obs[char] = observed

    def __repr__(self):
        return "<Specimen: %s (%s)>" % (self.name, self.taxon)


def _is_no_observation(observed):
    return NOT_APPLICABLE in observed or UNKNOWN in observed


class ObservationMatrix(object):
    """
    A phylogenetic data matrix: a collection of taxon specimens and their
    character states.

    >>> m = ObservationMatrix()
    >>> m.add('Pipidae', 'kluge1969:pipidae', 'pectoral girdle', 'arciferal')
    >>> m.add('Pipidae', 'kluge1969:pipidae', 'pectoral girdle', 'finnisternal')
    >>> m.obs('kluge1969:pipidae', 'pectoral girdle')
    ['arciferal', 'finnisternal']
    >>> m.obs('kluge1969:pipidae', 'tail muscle')
    ['<unknown>']
    """

    def __init__(self):
        self._characters = {}
        self._specimens = {}

    def add(self, taxon, spec, char, state):
        """
        Adds an observation (a character state) for a specimen of a taxon.

        Records with an empty taxon, specimen, character or state are
        ignored. A specimen keeps the taxon it was first added with, so
        observations for the same specimen under another taxon are
        ignored.

        :param taxon: taxon name
        :type taxon: string
        :param spec: specimen identifier
        :type spec: string
        :param char: character name
        :type char: string
        :param state: state name, or one of `NOT_APPLICABLE`, `UNKNOWN`
        :type state: string

        :return: None
        """
        taxon = canon(taxon)
        spec = fold_key(spec)
        char = fold_key(char)
        state = fold_key(state)
        if not (taxon and spec and char and state):
            return

        c = self._characters.get(char)
        if c is None:
            c = self._characters[char] = Character(char)
        if state != UNKNOWN:
            c.states.add(state)

        sp = self._specimens.get(spec)
        if sp is None:
            sp = self._specimens[spec] = Specimen(taxon, spec)
        if sp.taxon != taxon:
            return
        sp.add(char, state)

    def _observation(self, spec, char, state):
        sp = self._specimens.get(fold_key(spec))
        if sp is None:
            return None
        return sp.obs.get(fold_key(char), {}).get(fold_key(state))

    def set(self, spec, char, state, value, field):
        """
        Sets an additional information `field` of an observation.
        Nothing happens if the observation does not exist.

        :param field: a `Field` or its value
        """
        field = Field(field)
        o = self._observation(spec, char, state)
        if o is None:
            return
        setattr(o, field.value, fold(value))

    def val(self, spec, char, state, field):
        """Returns the value of an additional field of an observation."""
        field = Field(field)
        o = self._observation(spec, char, state)
        if o is None:
            return ''
        return getattr(o, field.value)

    def obs(self, spec, char):
        """
        Returns the sorted states assigned to a character in a specimen.
        Unknown specimens or characters give `[UNKNOWN]`.
        """
        sp = self._specimens.get(fold_key(spec))
        if sp is None:
            return [UNKNOWN]
        observed = sp.obs.get(fold_key(char))
        if not observed:
            return [UNKNOWN]
        return sorted(observed)

    def states(self, char):
        """Returns the states of a character, without `NOT_APPLICABLE`."""
        c = self._characters.get(fold_key(char))
        if c is None:
            return []
        return c.valid_states()

    def chars(self):
        return sorted(self._characters)

    def specimens(self):
        return sorted(self._specimens)

    def taxa(self):
        return sorted(set(sp.taxon for sp in self._specimens.values()))

    def taxon_specimens(self, taxon):
        """Returns the specimens of a given taxon."""
        taxon = canon(taxon)
        return sorted(sp.name for sp in self._specimens.values() if sp.taxon == taxon)

    def taxon(self, spec):
        """Returns the taxon of a specimen, or an empty string."""
        sp = self._specimens.get(fold_key(spec))
        return sp.taxon if sp is not None else ''

    def taxon_states(self, taxon, char):
        """
        Pools the states of a character over the specimens of a taxon.

        Only the first observation of a specimen is checked for the
        special states: a specimen starting with `NOT_APPLICABLE` sets the
        not applicable flag, one starting with `UNKNOWN` is ignored.

        :return: (set of states, not applicable flag)
        """
        pool = set()
        not_applicable = False
        for spec in self.taxon_specimens(taxon):
            obs = self.obs(spec, char)
            if obs[0] == NOT_APPLICABLE:
                not_applicable = True
                continue
            if obs[0] == UNKNOWN:
                continue
            pool.update(obs)
        return pool, not_applicable

    def __repr__(self):
        return "<ObservationMatrix: %d characters from %d specimens>" % (
            len(self._characters), len(self._specimens))
