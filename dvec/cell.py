"""
Storage cell for a dvec container.

The cell owns exactly one list, or a Vacancy tag saying why no list is
present. Nothing here validates access; the checkout protocol does that.
"""
from __future__ import annotations
from enum import Enum
from typing import Generic, List, TypeVar, Union

A = TypeVar("A")


class Vacancy(Enum):
    """Tag installed in place of the contents."""
    CHECKED_OUT = "checked out"   # an operation holds the list right now
    POISONED = "poisoned"         # that operation faulted and never gave it back
    CONSUMED = "consumed"         # moved out by unwrap() / transfer()


class CellState(str, Enum):
    PRESENT = "present"
    CHECKED_OUT = "checked out"
    POISONED = "poisoned"
    CONSUMED = "consumed"


class StorageCell(Generic[A]):
    __slots__ = ("contents",)

    def __init__(self, contents: List[A]) -> None:
        self.contents: Union[List[A], Vacancy] = contents

    @property
    def vacancy(self) -> Vacancy | None:
        contents = self.contents
        return contents if isinstance(contents, Vacancy) else None

    @property
    def state(self) -> CellState:
        vacancy = self.vacancy
        return CellState.PRESENT if vacancy is None else CellState(vacancy.value)

    def take(self, replacement: Vacancy = Vacancy.CHECKED_OUT) -> List[A]:
        """Swap the list out, leaving `replacement`. Caller checks vacancy first."""
        contents = self.contents
        assert not isinstance(contents, Vacancy)
        self.contents = replacement
        return contents

    def put(self, contents: List[A]) -> None:
        self.contents = contents

    def poison(self) -> None:
        if self.contents is Vacancy.CHECKED_OUT:
            self.contents = Vacancy.POISONED
