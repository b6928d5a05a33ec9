"""
Partial orders over a finite set of elements.

A :class:`PartialOrder` stores the full pairwise relation as a boolean
``le`` matrix, so every comparison is a single lookup. Relations are built
with a :class:`PartialOrderBuilder`, either checked (:meth:`finish`) or
trusting the caller to have supplied a transitively closed, antisymmetric
relation (:meth:`finish_unchecked`).
"""

import logging
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from . import config
from .errors import InconsistentOrderError

logger = logging.getLogger(__name__)


class Relation(Enum):
    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"
    INCOMPARABLE = "incomparable"


def find_inconsistency(le: np.ndarray) -> Optional[Tuple[str, int, int]]:
    """
    Look for a pair that breaks antisymmetry or transitivity.

    Args:
        le: Square boolean matrix, ``le[a, b]`` meaning ``a <= b``

    Returns:
        ``(reason, a, b)`` for the first offending pair, or None
    """
    n = le.shape[0]
    if n == 0:
        return None
    if not le.diagonal().all():
        a = int(np.flatnonzero(~le.diagonal())[0])
        return ("not reflexive", a, a)

    strict = le & ~np.eye(n, dtype=bool)
    both = strict & strict.T
    if both.any():
        a, b = np.argwhere(both)[0]
        return ("not antisymmetric", int(a), int(b))

    # a <= c and c <= b must imply a <= b
    implied = (le.astype(np.int64) @ le.astype(np.int64)) > 0
    missing = implied & ~le
    if missing.any():
        a, b = np.argwhere(missing)[0]
        return ("not transitive", int(a), int(b))
    return None


class PartialOrder:
    """
    A finished relation over ``elements`` items. Do not construct directly;
    use :class:`PartialOrderBuilder`.
    """

    __slots__ = ("_le",)

    def __init__(self, le: np.ndarray):
        self._le = le
        self._le.setflags(write=False)

    @property
    def elements(self) -> int:
        return self._le.shape[0]

    def le(self, a: int, b: int) -> bool:
        return bool(self._le[a, b])

    def lt(self, a: int, b: int) -> bool:
        return a != b and bool(self._le[a, b])

    def eq(self, a: int, b: int) -> bool:
        return bool(self._le[a, b] and self._le[b, a])

    def incomparable(self, a: int, b: int) -> bool:
        return not (self._le[a, b] or self._le[b, a])

    def ord(self, a: int, b: int) -> Relation:
        """Compare ``a`` to ``b``."""
        a_le_b = bool(self._le[a, b])
        b_le_a = bool(self._le[b, a])
        if a_le_b and b_le_a:
            return Relation.EQUAL
        if a_le_b:
            return Relation.LESS
        if b_le_a:
            return Relation.GREATER
        return Relation.INCOMPARABLE

    def is_valid(self) -> bool:
        """Re-run the full consistency check. O(elements³)."""
        return find_inconsistency(np.asarray(self._le)) is None

    def __eq__(self, other) -> bool:
        if not isinstance(other, PartialOrder):
            return NotImplemented
        return self._le.shape == other._le.shape and bool(
            np.array_equal(self._le, other._le)
        )

    def __repr__(self) -> str:
        return f"PartialOrder(elements={self.elements})"


class PartialOrderBuilder:
    """
    Collects ``lesser < greater`` facts for a new :class:`PartialOrder`.

    Only that direction is stored; the opposite direction is derived at
    query time.
    """

    def __init__(self, elements: int):
        if elements < 0:
            raise ValueError(f"elements must be non-negative, got {elements}")
        self._le = np.eye(elements, dtype=bool)
        self._finished = False

    @property
    def elements(self) -> int:
        return self._le.shape[0]

    def set(self, lesser: int, greater: int):
        """Record that ``lesser`` is strictly below ``greater``."""
        if self._finished:
            raise RuntimeError("Builder already finished")
        n = self.elements
        if not (0 <= lesser < n and 0 <= greater < n):
            raise IndexError(
                f"Pair ({lesser}, {greater}) out of range for {n} elements"
            )
        self._le[lesser, greater] = True

    def finish(self) -> PartialOrder:
        """
        Validate the relation and return it.

        Raises:
            InconsistentOrderError: If the relation is not antisymmetric or not
                transitively closed
        """
        problem = find_inconsistency(self._le)
        if problem is not None:
            reason, a, b = problem
            raise InconsistentOrderError(f"Relation is {reason} at ({a}, {b})")
        return self._take()

    def finish_unchecked(self) -> PartialOrder:
        """
        Return the relation without validating it.

        The caller must have set a transitively closed, antisymmetric relation.
        If not, comparisons on the result are wrong but never crash. The check
        only runs when debug checks are enabled.
        """
        if config.debug_checks_enabled():
            problem = find_inconsistency(self._le)
            assert problem is None, f"Unchecked relation is {problem}"
        return self._take()

    def _take(self) -> PartialOrder:
        self._finished = True
        logger.debug(f"Finished partial order over {self.elements} elements")
        return PartialOrder(self._le)
