"""
Chains: strict orders ranking elements from highest to lowest.

|               | Complete     | Incomplete   |
| ------------- | ------------ | ------------ |
| Owned         | Chain        | ChainI       |
| Reference     | ChainRef     | ChainIRef    |

Owned orders keep their own copy of the index data. References wrap a
read-only view of a caller-owned array (or a dense collection's backing
array) and never copy it.
"""

from typing import Optional

import numpy as np

from . import config
from ._util import as_index_array, readonly, unique_and_bounded
from .base import Order, ViewGuard
from .partial_order import PartialOrder, PartialOrderBuilder
from .tied import TiedIRef


class _ChainBase(Order):
    def __init__(self, elements: int, order: np.ndarray, guard: Optional[ViewGuard]):
        self._elements = elements
        self._order = order
        self._guard = guard

    @classmethod
    def _wrap(cls, elements: int, order: np.ndarray, guard: Optional[ViewGuard] = None):
        obj = cls.__new__(cls)
        _ChainBase.__init__(obj, elements, readonly(order), guard)
        return obj

    @property
    def elements(self) -> int:
        return self._elements

    @property
    def order(self) -> np.ndarray:
        """Ranked elements, highest first."""
        if self._guard is not None:
            self._guard.check()
        return self._order

    def __len__(self) -> int:
        return len(self.order)

    def to_partial(self) -> PartialOrder:
        builder = PartialOrderBuilder(self._elements)
        ranked = self.order.tolist()
        for i, higher in enumerate(ranked):
            for lower in ranked[i + 1 :]:
                builder.set(lower, higher)
        # Every ranked pair is set directly, so the relation is already
        # transitively closed. Unranked elements relate to nothing.
        return builder.finish_unchecked()

    def __eq__(self, other) -> bool:
        if not isinstance(other, _ChainBase):
            return NotImplemented
        return self._elements == other._elements and bool(
            np.array_equal(self.order, other.order)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(elements={self._elements}, order={self.order.tolist()})"


def _debug_check(elements: int, order: np.ndarray, name: str):
    if config.debug_checks_enabled():
        assert unique_and_bounded(elements, order), f"Invalid {name}: {order}"


class Chain(_ChainBase):
    """An owned permutation of all elements, highest rank first."""

    def __init__(self, order):
        arr = as_index_array(order).copy()
        if not unique_and_bounded(arr.size, arr):
            raise ValueError(f"Not a permutation: {arr.tolist()}")
        super().__init__(arr.size, readonly(arr), None)

    @classmethod
    def try_new(cls, order) -> Optional["Chain"]:
        try:
            return cls(order)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(cls, order) -> "Chain":
        """Skip validation. ``order`` must be a permutation of ``0..len(order)``."""
        arr = np.array(order, dtype=np.intp)
        _debug_check(arr.size, arr, "chain")
        return cls._wrap(arr.size, arr)

    @classmethod
    def random(cls, rng: np.random.Generator, elements: int) -> "Chain":
        return cls._wrap(elements, rng.permutation(elements).astype(np.intp))

    def top(self, n: int) -> np.ndarray:
        return self.order[:n]

    def as_ref(self) -> "ChainRef":
        return ChainRef._wrap(self._elements, self._order)

    def to_incomplete(self) -> "ChainI":
        return ChainI._wrap(self._elements, self._order.copy())


class ChainRef(_ChainBase):
    """A borrowed permutation of all elements, highest rank first."""

    def __init__(self, order):
        arr = as_index_array(order)
        if not unique_and_bounded(arr.size, arr):
            raise ValueError(f"Not a permutation: {arr.tolist()}")
        super().__init__(arr.size, readonly(arr), None)

    @classmethod
    def try_new(cls, order) -> Optional["ChainRef"]:
        try:
            return cls(order)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(cls, order, guard: Optional[ViewGuard] = None) -> "ChainRef":
        arr = as_index_array(order)
        _debug_check(arr.size, arr, "chain")
        return cls._wrap(arr.size, arr, guard)

    def top(self, n: int) -> np.ndarray:
        return self.order[:n]

    def to_owned(self) -> Chain:
        return Chain._wrap(self._elements, self.order.copy())

    def to_incomplete(self) -> "ChainIRef":
        return ChainIRef._wrap(self._elements, self.order, self._guard)


class ChainI(_ChainBase):
    """An owned strict order over a subset of ``elements``, highest rank first."""

    def __init__(self, elements: int, order):
        arr = as_index_array(order).copy()
        if elements < 0 or not unique_and_bounded(elements, arr):
            raise ValueError(
                f"Order {arr.tolist()} is not unique and bounded by {elements}"
            )
        super().__init__(elements, readonly(arr), None)

    @classmethod
    def try_new(cls, elements: int, order) -> Optional["ChainI"]:
        try:
            return cls(elements, order)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(cls, elements: int, order) -> "ChainI":
        arr = np.array(order, dtype=np.intp)
        _debug_check(elements, arr, "incomplete chain")
        return cls._wrap(elements, arr)

    @classmethod
    def random(cls, rng: np.random.Generator, elements: int) -> "ChainI":
        """Random subset of random length (possibly empty or complete), randomly ordered."""
        if elements == 0:
            return cls._wrap(0, np.empty(0, dtype=np.intp))
        length = int(rng.integers(0, elements + 1))
        order = rng.permutation(elements)[:length].astype(np.intp)
        return cls._wrap(elements, order)

    def top(self, n: int) -> "ChainI":
        return ChainI._wrap(self._elements, self.order[:n].copy())

    def winner(self) -> int:
        if len(self) == 0:
            raise ValueError("Empty order has no winner")
        return int(self.order[0])

    def as_ref(self) -> "ChainIRef":
        return ChainIRef._wrap(self._elements, self._order)

    def to_complete(self) -> Optional[Chain]:
        """Convert to a complete chain, or None if some element is unranked."""
        if len(self) != self._elements:
            return None
        return Chain._wrap(self._elements, self._order.copy())


class ChainIRef(_ChainBase):
    """A borrowed strict order over a subset of ``elements``."""

    def __init__(self, elements: int, order):
        arr = as_index_array(order)
        if elements < 0 or not unique_and_bounded(elements, arr):
            raise ValueError(
                f"Order {arr.tolist()} is not unique and bounded by {elements}"
            )
        super().__init__(elements, readonly(arr), None)

    @classmethod
    def try_new(cls, elements: int, order) -> Optional["ChainIRef"]:
        try:
            return cls(elements, order)
        except ValueError:
            return None

    @classmethod
    def new_unchecked(
        cls, elements: int, order, guard: Optional[ViewGuard] = None
    ) -> "ChainIRef":
        arr = as_index_array(order)
        _debug_check(elements, arr, "incomplete chain")
        return cls._wrap(elements, arr, guard)

    def top(self, n: int) -> "ChainIRef":
        return ChainIRef._wrap(self._elements, self.order[:n], self._guard)

    def winner(self) -> int:
        if len(self) == 0:
            raise ValueError("Empty order has no winner")
        return int(self.order[0])

    def to_owned(self) -> ChainI:
        return ChainI._wrap(self._elements, self.order.copy())

    def to_complete(self) -> Optional[ChainRef]:
        if len(self) != self._elements:
            return None
        return ChainRef._wrap(self._elements, self.order, self._guard)

    def to_tied(self, tied):
        """Attach tie flags to this order, producing a borrowed incomplete tied order."""
        return TiedIRef(self._elements, self.order, tied)
