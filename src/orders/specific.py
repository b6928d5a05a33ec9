import numpy as np

from .base import Order
from .partial_order import PartialOrder, PartialOrderBuilder
from .sampling import uniform_index


class Specific(Order):
    """A single winning element; everyone else is below it and mutually unranked."""

    __slots__ = ("value", "_elements")

    def __init__(self, value: int, elements: int):
        if not 0 <= value < elements:
            raise ValueError(f"Winner {value} not in range of {elements} elements")
        self.value = value
        self._elements = elements

    @classmethod
    def random(cls, rng: np.random.Generator, elements: int) -> "Specific":
        return cls(uniform_index(rng, elements), elements)

    @property
    def elements(self) -> int:
        return self._elements

    def __len__(self) -> int:
        return 1

    def to_partial(self) -> PartialOrder:
        builder = PartialOrderBuilder(self._elements)
        for i in range(self._elements):
            if i != self.value:
                builder.set(i, self.value)
        # No element other than the winner is above anything, so there are no
        # transitive relations to add.
        return builder.finish_unchecked()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Specific):
            return NotImplemented
        return self.value == other.value and self._elements == other._elements

    def __repr__(self) -> str:
        return f"Specific(value={self.value}, elements={self._elements})"
