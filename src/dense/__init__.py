"""
Dense collections: many orders of one kind packed into flat arrays.

Storing orders in a list would give every order its own allocation. These
collections keep all orders of a kind in a few contiguous numpy arrays
(plus end offsets for variable-length kinds) and hand out read-only views.

All collections share the DenseOrders contract: push, try_get/get, len,
generate_uniform, remove_element and to_frame.
"""

from .base import DenseOrders
from .binary import BinaryDense
from .cardinal import CardinalDense
from .chain import ChainIDense
from .specific import SpecificDense
from .tied import TiedDense
from .tied_incomplete import TiedIDense
from .total import TotalDense

__all__ = [
    "BinaryDense",
    "CardinalDense",
    "ChainIDense",
    "DenseOrders",
    "SpecificDense",
    "TiedDense",
    "TiedIDense",
    "TotalDense",
]
