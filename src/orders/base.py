from abc import ABC, abstractmethod

from .errors import StaleViewError


class ViewGuard:
    """
    Ties a borrowed view to the generation of the collection it points into.

    Collections bump their generation on every mutation, so a view created
    before a push, removal or conversion fails loudly instead of reading
    shifted data.
    """

    __slots__ = ("_owner", "_generation")

    def __init__(self, owner):
        self._owner = owner
        self._generation = owner.generation

    def check(self):
        if self._owner.generation != self._generation:
            raise StaleViewError(
                f"View into {type(self._owner).__name__} used after the collection was mutated"
            )


class Order(ABC):
    """Common surface of every order kind."""

    @property
    @abstractmethod
    def elements(self) -> int:
        """Number of elements that can be part of this order."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of elements currently part of this order."""

    def is_empty(self) -> bool:
        return len(self) == 0

    @abstractmethod
    def to_partial(self):
        """Build the full pairwise relation of this order."""
