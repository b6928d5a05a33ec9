"""
Exceptions raised by order types and dense collections.
"""


class OrderError(Exception):
    """Base class for every error raised by this library."""


class AddError(OrderError):
    """Pushing an order onto a dense collection failed."""


class ElementsMismatchError(AddError):
    """The pushed order ranks a different number of elements than the collection."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Order has {actual} elements but the collection holds {expected}"
        )


class AllocError(AddError):
    """Backing storage could not be reserved."""


class ElementOutOfRangeError(OrderError, ValueError):
    """An element index is not part of the universe."""

    def __init__(self, target: int, elements: int):
        self.target = target
        self.elements = elements
        super().__init__(f"Element {target} not in collection of {elements} elements")


class InconsistentOrderError(OrderError):
    """A relation is not antisymmetric or not transitively closed."""


class StaleViewError(OrderError, RuntimeError):
    """A borrowed view was used after its collection was mutated."""
