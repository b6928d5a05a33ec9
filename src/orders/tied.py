"""
Tied orders: every element is comparable, ordered from highest to lowest,
and some adjacent ranks may be tied.

|               | Complete     | Incomplete   |
| ------------- | ------------ | ------------ |
| Owned         | Tied         | TiedI        |
| Reference     | TiedRef      | TiedIRef     |

``tied[i]`` is True when the element at rank ``i`` is tied with the element at
rank ``i + 1``. Ties only ever link adjacent ranks; a run of True flags forms
one tie group.
"""

from typing import Iterator, Optional

import numpy as np

from . import config
from ._util import as_flag_array, as_index_array, readonly, sort_using, unique_and_bounded
from .base import Order, ViewGuard
from .partial_order import PartialOrder, PartialOrderBuilder
from .sampling import coin_flips, shuffled, uniform_index
from .specific import Specific


def valid_tied(elements: int, order: np.ndarray, tied: np.ndarray) -> bool:
    """True if ``order`` is unique and bounded and ``tied`` has one flag per adjacent pair."""
    if tied.ndim != 1 or tied.size != max(order.size - 1, 0):
        return False
    return unique_and_bounded(elements, order)


def iter_groups(order: np.ndarray, tied: np.ndarray) -> Iterator[np.ndarray]:
    """
    Yield maximal runs of mutually tied elements, highest group first.

    A run closes whenever a tie flag is False. The yielded arrays are views
    into ``order``.
    """
    start = 0
    for i in np.flatnonzero(~tied):
        yield order[start : i + 1]
        start = i + 1
    if start < order.size:
        yield order[start:]


def winners_of(order: np.ndarray, tied: np.ndarray) -> np.ndarray:
    """The top tie group of an order, as a view."""
    if order.size == 0:
        return order
    breaks = np.flatnonzero(~tied)
    end = breaks[0] + 1 if breaks.size else order.size
    return order[:end]


def drop_rank(order: np.ndarray, tied: np.ndarray, rank: int):
    """
    Remove the element at ``rank`` and fix up the tie flags around it.

    The survivors on either side of an interior rank stay tied only if both
    were tied with the removed element. At the first or last rank the single
    adjacent flag is dropped.

    Returns:
        New ``(order, tied)`` arrays
    """
    order = np.delete(order, rank)
    if tied.size == 0:
        return order, tied.copy()
    if rank == 0:
        return order, tied[1:].copy()
    if rank == tied.size:
        return order, tied[:-1].copy()
    merged = bool(tied[rank - 1] and tied[rank])
    return order, np.concatenate((tied[: rank - 1], [merged], tied[rank + 1 :]))


class _TiedBase(Order):
    def __init__(
        self,
        elements: int,
        order: np.ndarray,
        tied: np.ndarray,
        guard: Optional[ViewGuard],
    ):
        self._elements = elements
        self._order = order
        self._tied = tied
        self._guard = guard

    @classmethod
    def _wrap(
        cls,
        elements: int,
        order: np.ndarray,
        tied: np.ndarray,
        guard: Optional[ViewGuard] = None,
    ):
        obj = cls.__new__(cls)
        _TiedBase.__init__(obj, elements, readonly(order), readonly(tied), guard)
        return obj

    @staticmethod
    def _checked(elements: int, order, tied, copy: bool):
        order_arr = as_index_array(order)
        tied_arr = as_flag_array(tied)
        if copy:
            order_arr = order_arr.copy()
            tied_arr = tied_arr.copy()
        if elements < 0 or not valid_tied(elements, order_arr, tied_arr):
            raise ValueError(
                f"Invalid tied order {order_arr.tolist()} with ties {tied_arr.tolist()} "
                f"over {elements} elements"
            )
        return order_arr, tied_arr

    @staticmethod
    def _debug_check(elements: int, order: np.ndarray, tied: np.ndarray):
        if config.debug_checks_enabled():
            assert valid_tied(elements, order, tied), (
                f"Invalid tied order {order} with ties {tied}"
            )

    @property
    def elements(self) -> int:
        return self._elements

    @property
    def order(self) -> np.ndarray:
        if self._guard is not None:
            self._guard.check()
        return self._order

    @property
    def tied(self) -> np.ndarray:
        if self._guard is not None:
            self._guard.check()
        return self._tied

    def __len__(self) -> int:
        return len(self.order)

    def iter_groups(self) -> Iterator[np.ndarray]:
        return iter_groups(self.order, self.tied)

    def winners(self) -> np.ndarray:
        """All jointly highest ranked elements."""
        return winners_of(self.order, self.tied)

    def winner(self, rng: np.random.Generator) -> Specific:
        """Pick one of the winners uniformly at random."""
        top = self.winners()
        if top.size == 0:
            raise ValueError("Empty order has no winner")
        return Specific(int(top[uniform_index(rng, top.size)]), self._elements)

    def to_partial(self) -> PartialOrder:
        builder = PartialOrderBuilder(self._elements)
        seen = []
        for group in self.iter_groups():
            members = group.tolist()
            for lower in members:
                for higher in seen:
                    builder.set(lower, higher)
            seen.extend(members)
        # Each element relates to nothing in its own group and is below every
        # element of an earlier group, which is transitively closed.
        return builder.finish_unchecked()

    def __eq__(self, other) -> bool:
        if not isinstance(other, _TiedBase):
            return NotImplemented
        return (
            self._elements == other._elements
            and bool(np.array_equal(self.order, other.order))
            and bool(np.array_equal(self.tied, other.tied))
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(elements={self._elements}, "
            f"order={self.order.tolist()}, tied={self.tied.tolist()})"
        )


def _random_parts(rng: np.random.Generator, elements: int, length: int):
    order = shuffled(rng, np.arange(elements, dtype=np.intp))[:length]
    tied = coin_flips(rng, max(length - 1, 0))
    return order, tied


class Tied(_TiedBase):
    """An owned complete order with ties."""

    def __init__(self, order, tied):
        order_arr = as_index_array(order)
        order_arr, tied_arr = self._checked(order_arr.size, order_arr, tied, copy=True)
        super().__init__(order_arr.size, readonly(order_arr), readonly(tied_arr), None)

    @classmethod
    def try_new(cls, order, tied) -> Optional["Tied"]:
        try:
            return cls(order, tied)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(cls, order, tied) -> "Tied":
        order_arr = np.array(order, dtype=np.intp)
        tied_arr = np.array(tied, dtype=np.bool_)
        cls._debug_check(order_arr.size, order_arr, tied_arr)
        return cls._wrap(order_arr.size, order_arr, tied_arr)

    @classmethod
    def new_tied(cls, elements: int) -> "Tied":
        """
        Create an order of ``elements`` where every element is tied.

        >>> len(Tied.new_tied(10).winners())
        10
        """
        return cls._wrap(
            elements,
            np.arange(elements, dtype=np.intp),
            np.ones(max(elements - 1, 0), dtype=np.bool_),
        )

    @classmethod
    def random(cls, rng: np.random.Generator, elements: int) -> "Tied":
        """Uniform permutation with an independent fair coin per adjacent gap."""
        order, tied = _random_parts(rng, elements, elements)
        return cls._wrap(elements, order, tied)

    @classmethod
    def from_cardinal(cls, cardinal) -> "Tied":
        """
        Rank elements by score, highest first. Equal scores are tied.

        Args:
            cardinal: A Cardinal or CardinalRef
        """
        order = list(range(len(cardinal.values)))
        keys = [-score for score in cardinal.values.tolist()]
        # Stable, so equal scores keep ascending element order
        sort_using(order, keys)
        tied = [a == b for a, b in zip(keys, keys[1:])]
        return cls._wrap(
            len(order), np.array(order, dtype=np.intp), np.array(tied, dtype=np.bool_)
        )

    def as_ref(self) -> "TiedRef":
        return TiedRef._wrap(self._elements, self._order, self._tied)

    def to_incomplete(self) -> "TiedI":
        return TiedI._wrap(self._elements, self._order.copy(), self._tied.copy())


class TiedRef(_TiedBase):
    """A borrowed complete order with ties."""

    def __init__(self, order, tied):
        order_arr = as_index_array(order)
        order_arr, tied_arr = self._checked(order_arr.size, order_arr, tied, copy=False)
        super().__init__(order_arr.size, readonly(order_arr), readonly(tied_arr), None)

    @classmethod
    def try_new(cls, order, tied) -> Optional["TiedRef"]:
        try:
            return cls(order, tied)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(cls, order, tied, guard: Optional[ViewGuard] = None) -> "TiedRef":
        order_arr = as_index_array(order)
        tied_arr = as_flag_array(tied)
        cls._debug_check(order_arr.size, order_arr, tied_arr)
        return cls._wrap(order_arr.size, order_arr, tied_arr, guard)

    def to_owned(self) -> Tied:
        return Tied._wrap(self._elements, self.order.copy(), self.tied.copy())

    def to_incomplete(self) -> "TiedIRef":
        return TiedIRef._wrap(self._elements, self.order, self.tied, self._guard)


class TiedI(_TiedBase):
    """An owned order with ties over a subset of ``elements``."""

    def __init__(self, elements: int, order, tied):
        order_arr, tied_arr = self._checked(elements, order, tied, copy=True)
        super().__init__(elements, readonly(order_arr), readonly(tied_arr), None)

    @classmethod
    def try_new(cls, elements: int, order, tied) -> Optional["TiedI"]:
        try:
            return cls(elements, order, tied)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(cls, elements: int, order, tied) -> "TiedI":
        order_arr = np.array(order, dtype=np.intp)
        tied_arr = np.array(tied, dtype=np.bool_)
        cls._debug_check(elements, order_arr, tied_arr)
        return cls._wrap(elements, order_arr, tied_arr)

    @classmethod
    def random(cls, rng: np.random.Generator, elements: int) -> "TiedI":
        """Random subset of random length, random order and fair ties."""
        length = int(rng.integers(0, elements + 1)) if elements else 0
        order, tied = _random_parts(rng, elements, length)
        return cls._wrap(elements, order, tied)

    def as_ref(self) -> "TiedIRef":
        return TiedIRef._wrap(self._elements, self._order, self._tied)

    def to_complete(self) -> Optional[Tied]:
        if len(self) != self._elements:
            return None
        return Tied._wrap(self._elements, self._order.copy(), self._tied.copy())


class TiedIRef(_TiedBase):
    """A borrowed order with ties over a subset of ``elements``."""

    def __init__(self, elements: int, order, tied):
        order_arr, tied_arr = self._checked(elements, order, tied, copy=False)
        super().__init__(elements, readonly(order_arr), readonly(tied_arr), None)

    @classmethod
    def try_new(cls, elements: int, order, tied) -> Optional["TiedIRef"]:
        try:
            return cls(elements, order, tied)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(
        cls, elements: int, order, tied, guard: Optional[ViewGuard] = None
    ) -> "TiedIRef":
        order_arr = as_index_array(order)
        tied_arr = as_flag_array(tied)
        cls._debug_check(elements, order_arr, tied_arr)
        return cls._wrap(elements, order_arr, tied_arr, guard)

    def to_owned(self) -> TiedI:
        return TiedI._wrap(self._elements, self.order.copy(), self.tied.copy())

    def to_complete(self) -> Optional[TiedRef]:
        if len(self) != self._elements:
            return None
        return TiedRef._wrap(self._elements, self.order, self.tied, self._guard)
