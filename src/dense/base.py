"""
The uniform contract shared by every dense collection.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, Optional

import numpy as np
import pandas as pd

from orders.base import ViewGuard
from orders.errors import ElementOutOfRangeError, ElementsMismatchError

logger = logging.getLogger(__name__)


class DenseOrders(ABC):
    """
    A packed store of many orders of one kind, all over the same ``elements``.

    Orders are read back as borrowed views into the packed arrays. Views are
    only valid until the next mutation (push, generation, element removal or
    conversion); using one afterwards raises ``StaleViewError``.
    """

    def __init__(self, elements: int):
        if elements < 0:
            raise ValueError(f"elements must be non-negative, got {elements}")
        self._elements = elements
        self._generation = 0

    @property
    def elements(self) -> int:
        """Number of elements every stored order ranks."""
        return self._elements

    @property
    def generation(self) -> int:
        """Mutation counter used to invalidate borrowed views."""
        return self._generation

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored orders."""

    def is_empty(self) -> bool:
        return len(self) == 0

    def push(self, order):
        """
        Append one order.

        Args:
            order: An order of this collection's kind (owned or borrowed)

        Raises:
            ElementsMismatchError: If the order's element count differs
            AllocError: If backing storage could not be reserved
        """
        self._push(order)
        self._mutated()

    @abstractmethod
    def _push(self, order):
        """Validate and append ``order``; must not change state on failure."""

    @abstractmethod
    def try_get(self, i: int):
        """Borrowed view of order ``i``, or None if out of range."""

    def get(self, i: int):
        """Borrowed view of order ``i``. The index must be in range."""
        assert 0 <= i < len(self), f"Order index {i} out of range for {len(self)} orders"
        return self.try_get(i)

    def __iter__(self) -> Iterator:
        return (self.get(i) for i in range(len(self)))

    def remove_element(self, target: int):
        """
        Remove ``target`` from the universe and from every stored order.

        Elements above ``target`` shift down by one so the survivors keep their
        relative order. Afterwards ``elements`` is one smaller.

        Raises:
            ElementOutOfRangeError: If ``target`` is not an element
        """
        if not 0 <= target < self._elements:
            raise ElementOutOfRangeError(target, self._elements)

        if self._elements == 1:
            self._clear()
        elif len(self) > 0:
            self._remove_element(target)
        self._elements -= 1
        self._mutated()
        logger.info(
            f"Removed element {target} from {len(self)} {type(self).__name__} orders; "
            f"{self._elements} elements remain"
        )

    @abstractmethod
    def _remove_element(self, target: int):
        """Drop ``target`` from every order. Called with ``elements >= 2``."""

    @abstractmethod
    def _clear(self):
        """Drop every stored order and release the backing arrays."""

    def generate_uniform(self, rng: np.random.Generator, count: int):
        """
        Append ``count`` uniformly random orders, using ``rng`` for all randomness.

        Does nothing when ``elements`` is 0.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if self._elements == 0 or count == 0:
            return
        self._generate(rng, count)
        self._mutated()
        logger.debug(
            f"Generated {count} random {type(self).__name__} orders over {self._elements} elements"
        )

    @abstractmethod
    def _generate(self, rng: np.random.Generator, count: int):
        """Append ``count`` random orders. Called with ``elements >= 1``."""

    def to_frame(self) -> pd.DataFrame:
        """
        Long-format table of the stored orders, one row per ranked element.

        Returns:
            DataFrame whose columns depend on the order kind
        """
        return pd.DataFrame(self._frame_columns())

    @abstractmethod
    def _frame_columns(self) -> dict:
        """Column name to array mapping for :meth:`to_frame`."""

    def _guard(self) -> ViewGuard:
        return ViewGuard(self)

    def _mutated(self):
        self._generation += 1

    def _check_elements(self, order, length: Optional[int] = None):
        """
        Raise ElementsMismatchError unless ``order`` matches this collection.

        Args:
            order: The order being pushed
            length: Required number of ranked elements, for complete kinds
        """
        if order.elements != self._elements:
            raise ElementsMismatchError(self._elements, order.elements)
        if length is not None and len(order) != length:
            raise ElementsMismatchError(self._elements, len(order))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(elements={self._elements}, orders={len(self)})"
