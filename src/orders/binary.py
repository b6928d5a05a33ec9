from typing import Optional

import numpy as np

from ._util import as_flag_array, readonly
from .base import Order, ViewGuard
from .partial_order import PartialOrder, PartialOrderBuilder


class BinaryRef(Order):
    """Borrowed high/low flags, one per element."""

    def __init__(self, values, guard: Optional[ViewGuard] = None):
        arr = as_flag_array(values)
        if arr.ndim != 1:
            raise ValueError("Flags must be one-dimensional")
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

    def to_owned(self) -> "Binary":
        return Binary(self.values.copy())

    def to_partial(self) -> PartialOrder:
        builder = PartialOrderBuilder(self.elements)
        flags = self.values
        for low in np.flatnonzero(~flags).tolist():
            for high in np.flatnonzero(flags).tolist():
                builder.set(low, high)
        return builder.finish_unchecked()

    def __eq__(self, other) -> bool:
        if not isinstance(other, BinaryRef):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.values.tolist()})"


class Binary(BinaryRef):
    """Owned high/low flags, one per element."""

    def __init__(self, values):
        super().__init__(np.array(values, dtype=np.bool_))

    def as_ref(self) -> BinaryRef:
        return BinaryRef(self._values)
