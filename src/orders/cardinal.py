from typing import Optional

import numpy as np

from ._util import readonly
from .base import Order, ViewGuard
from .binary import Binary
from .partial_order import PartialOrder, PartialOrderBuilder


class CardinalRef(Order):
    """Borrowed scores, one per element. Scores need not be distinct."""

    def __init__(self, values, guard: Optional[ViewGuard] = None):
        arr = np.asarray(values, dtype=np.int64)
        if arr.ndim != 1:
            raise ValueError("Scores must be one-dimensional")
        self._values = readonly(arr)
        self._guard = guard

    @property
    def values(self) -> np.ndarray:
        if self._guard is not None:
            self._guard.check()
        return self._values

    @property
    def elements(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self.values)

    def to_binary(self, cutoff: int) -> Binary:
        """Scores at or above ``cutoff`` become True, the rest False."""
        return Binary(self.values >= cutoff)

    def to_owned(self) -> "Cardinal":
        return Cardinal(self.values.copy())

    def to_partial(self) -> PartialOrder:
        builder = PartialOrderBuilder(self.elements)
        scores = self.values.tolist()
        for a, score_a in enumerate(scores):
            for b, score_b in enumerate(scores):
                if score_a < score_b:
                    builder.set(a, b)
        # Ordering by score is transitive; equal scores stay unrelated.
        return builder.finish_unchecked()

    def __eq__(self, other) -> bool:
        if not isinstance(other, CardinalRef):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.values.tolist()})"


class Cardinal(CardinalRef):
    """Owned scores, one per element."""

    def __init__(self, values):
        super().__init__(np.array(values, dtype=np.int64))

    def as_ref(self) -> CardinalRef:
        return CardinalRef(self._values)
