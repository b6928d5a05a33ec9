"""
Finite orders over a universe of ``elements`` indexed items.

The most general order is the PartialOrder; the other kinds represent
smaller families of orders more compactly:
- Binary: every element is ranked high or low
- Cardinal: every element is given a score
- Chain / ChainI: a strict ranking of all (or some) elements
- Tied / TiedI: a ranking of all (or some) elements where adjacent ranks may tie
- Specific: a single winner above everyone else

For packed storage of many orders, see the ``dense`` package.
"""

from .binary import Binary, BinaryRef
from .cardinal import Cardinal, CardinalRef
from .chain import Chain, ChainI, ChainIRef, ChainRef
from .errors import (
    AddError,
    AllocError,
    ElementOutOfRangeError,
    ElementsMismatchError,
    InconsistentOrderError,
    OrderError,
    StaleViewError,
)
from .partial_order import PartialOrder, PartialOrderBuilder, Relation
from .specific import Specific
from .tied import Tied, TiedI, TiedIRef, TiedRef, iter_groups

__all__ = [
    "AddError",
    "AllocError",
    "Binary",
    "BinaryRef",
    "Cardinal",
    "CardinalRef",
    "Chain",
    "ChainI",
    "ChainIRef",
    "ChainRef",
    "ElementOutOfRangeError",
    "ElementsMismatchError",
    "InconsistentOrderError",
    "OrderError",
    "PartialOrder",
    "PartialOrderBuilder",
    "Relation",
    "Specific",
    "StaleViewError",
    "Tied",
    "TiedI",
    "TiedIRef",
    "TiedRef",
    "iter_groups",
]
