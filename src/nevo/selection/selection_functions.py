"""
Selection Functions Module

This module implements the strategies used by the Pool to pick parents when
breeding a new generation.

Every strategy expects its candidates to be sorted descending by score (the
best network first), which is the order the Pool keeps its members in while
breeding.

Classes:
    SelectionFunction:    Abstract base class of all strategies
    Power:                Picks with a power-law bias toward the front
    Tournament:           Picks the winner of a randomly drawn tournament
    FitnessProportionate: Roulette-wheel selection proportional to score
"""

import math
import random
import re
import threading
from abc    import ABC, abstractmethod
from typing import Sequence, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from nevo.genotype import Network

G = TypeVar("G", bound="Network")

class SelectionFunction(ABC):
    """
    A strategy which selects one network from a collection of networks.

    The random number generator used for a selection is, in order of precedence:
    the one passed to the call, the one passed to the constructor, the global
    'random' module.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    def _generator(self, rng):
        if rng is not None:
            return rng
        if self._rng is not None:
            return self._rng
        return random

    def __call__(self, candidates: Sequence[G], rng: random.Random | None = None) -> G:
        """
        Select one of the 'candidates' (sorted descending by score).

        Raises:
            ValueError: if there are no candidates
        """
        if len(candidates) == 0:
            raise ValueError("cannot select from an empty collection of candidates")
        return self._select(candidates, self._generator(rng))

    @abstractmethod
    def _select(self, candidates: Sequence[G], rng) -> G:
        pass

class Power(SelectionFunction):
    """
    Picks the candidate at position floor(u^exponent * n), u uniform in [0, 1).

    The larger the exponent (above 1), the stronger the bias toward the front of
    the (sorted) candidates; an exponent of 1 selects uniformly.
    """

    def __init__(self, exponent: float = 5.0, rng: random.Random | None = None):
        super().__init__(rng)
        self.exponent = float(exponent)

    def _select(self, candidates, rng):
        index = math.floor(rng.random() ** self.exponent * len(candidates))
        return candidates[min(index, len(candidates) - 1)]

    def __eq__(self, other):
        return isinstance(other, Power) and self.exponent == other.exponent

    def __hash__(self):
        return hash((Power, self.exponent))

    def __repr__(self):
        return f"Power(exponent={self.exponent})"

class Tournament(SelectionFunction):
    """
    Draws a tournament of 'size' candidates (with replacement, or all candidates
    if 'size' is None), sorts it descending and walks it from the best down,
    accepting each candidate with the given 'probability'. If nobody is accepted
    the worst one of the tournament is returned.
    """

    def __init__(self, size: int | None = None, probability: float = 0.5, rng: random.Random | None = None):
        super().__init__(rng)
        if size is not None and size < 1:
            raise ValueError("the tournament size must be at least 1")
        self.size        = size
        self.probability = probability

    def _select(self, candidates, rng):
        if self.size is None:
            tournament = list(candidates)
        else:
            drawn = [candidates[rng.randrange(len(candidates))] for _ in range(self.size)]

            # de-duplicate by identity
            unique = {id(candidate): candidate for candidate in drawn}
            tournament = sorted(unique.values(), key=lambda network: network.score, reverse=True)

        for candidate in tournament:
            if rng.random() < self.probability:
                return candidate
        return tournament[-1]

    def __eq__(self, other):
        return isinstance(other, Tournament) and (self.size, self.probability) == (other.size, other.probability)

    def __hash__(self):
        return hash((Tournament, self.size, self.probability))

    def __repr__(self):
        return f"Tournament(size={self.size}, probability={self.probability})"

class FitnessProportionate(SelectionFunction):
    """
    Roulette-wheel selection: the chance of a candidate being picked is
    proportional to its score.

    If some scores are negative, all of them are shifted by the same amount so
    that the lowest one sits just above zero.

    The total (shifted) score and the shift are cached per candidate tuple (by
    identity); other collections are summed on every call. When the scores of a
    cached tuple change, call 'reset()' before selecting again.
    """

    def __init__(self, rng: random.Random | None = None):
        super().__init__(rng)
        self._cache: dict[int, tuple[Sequence, float, float]] = {}
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Clear the cached totals."""
        with self._lock:
            self._cache.clear()

    @staticmethod
    def _compute_totals(candidates) -> tuple[float, float]:
        scores = [candidate.score for candidate in candidates]
        total  = sum(scores)
        lowest = min(scores)
        if lowest < 0:
            shift  = math.nextafter(lowest, -math.inf)
            total -= shift * len(scores)
        else:
            shift = 0.0
        return total, shift

    def _totals(self, candidates) -> tuple[float, float]:
        # lists are usually built for a single call, so only tuples are cached
        if not isinstance(candidates, tuple):
            return self._compute_totals(candidates)

        with self._lock:
            entry = self._cache.get(id(candidates))

            # the tuple itself is kept in the entry, so its id cannot be reused
            if entry is not None and entry[0] is candidates:
                return entry[1], entry[2]

            total, shift = self._compute_totals(candidates)
            self._cache[id(candidates)] = (candidates, total, shift)
            return total, shift

    def _select(self, candidates, rng):
        total, shift = self._totals(candidates)

        threshold  = rng.random() * total
        cumulative = 0.0
        for candidate in candidates:
            cumulative += candidate.score - shift
            if threshold < cumulative:
                return candidate

        # all scores are zero (or rounding left the threshold uncovered)
        return candidates[rng.randrange(len(candidates))]

    def __eq__(self, other):
        return isinstance(other, FitnessProportionate)

    def __hash__(self):
        return hash(FitnessProportionate)

    def __repr__(self):
        return "FitnessProportionate()"

selection_functions = {
    "power"                : Power,
    "tournament"           : Tournament,
    "fitnessproportionate" : FitnessProportionate,
    "fitness_proportionate": FitnessProportionate
    }

# maximum number of textual parameters accepted by each strategy
_MAX_PARAMS = {Power: 1, Tournament: 2, FitnessProportionate: 0}

_SELECTION_PATTERN = re.compile(r"^\s*([a-z_]+)\s*(?:\(\s*([^()]*?)\s*\))?\s*$")

def parse_selection(text: str) -> SelectionFunction:
    """
    Build a selection strategy from its textual description.

    Examples: "power", "power(3)", "tournament(5, 0.7)", "tournament(none, 0.5)",
              "fitness_proportionate"

    Raises:
        ValueError: if the description cannot be parsed
    """
    match = _SELECTION_PATTERN.match(text.lower())
    if match is None or match.group(1) not in selection_functions:
        raise ValueError(f"Invalid selection function '{text}'")

    name, raw_params = match.groups()
    selection_class  = selection_functions[name]

    params = []
    if raw_params:
        for raw in raw_params.split(","):
            raw = raw.strip()
            if raw == "none":
                params.append(None)
            elif selection_class is Tournament and not params:
                params.append(int(raw))
            else:
                params.append(float(raw))

    if len(params) > _MAX_PARAMS[selection_class]:
        raise ValueError(f"Too many parameters for selection function '{text}'")
    return selection_class(*params)
