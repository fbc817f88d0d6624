"""
Scoped views handed to borrow() / borrow_mut().

- PeekView: read-only access to the checked-out list
- PokeView: element writes in place, no resizing

A view is valid only while its checkout is in flight. Once the storage is
given back the view is released and any further use raises UseAfterMove,
so a callback cannot smuggle an alias of the storage out of its scope.
"""
from __future__ import annotations
from typing import Any, Callable, Iterator, List, Optional, Sequence, TypeVar, overload

from dvec.internals import errors as er

A = TypeVar("A")


class PeekView(Sequence[A]):
    __slots__ = ("_data", "_live")

    def __init__(self, data: List[A]) -> None:
        self._data = data
        self._live = True

    def _check(self, op: str) -> List[A]:
        if not self._live:
            er.raise_runtime_error("RE2032", op=f"{type(self).__name__}.{op}")
        return self._data

    def _release(self) -> None:
        self._live = False
        self._data = []

    @overload
    def __getitem__(self, idx: int) -> A: ...
    @overload
    def __getitem__(self, idx: slice) -> List[A]: ...

    def __getitem__(self, idx):
        return self._check("getitem")[idx]

    def __len__(self) -> int:
        return len(self._check("len"))

    def __iter__(self) -> Iterator[A]:
        return iter(self._check("iter"))

    def __repr__(self) -> str:
        if not self._live:
            return f"<{type(self).__name__} released>"
        return f"{type(self).__name__}({self._data!r})"


class PokeView(PeekView[A]):
    """Mutable view: overwrite, swap, reverse or sort elements; length is fixed."""

    __slots__ = ()

    def __setitem__(self, idx, value) -> None:
        data = self._check("setitem")
        if isinstance(idx, slice):
            value = list(value)
            if len(range(*idx.indices(len(data)))) != len(value):
                raise ValueError("PokeView slice assignment cannot change the length")
        data[idx] = value

    def swap(self, i: int, j: int) -> None:
        data = self._check("swap")
        data[i], data[j] = data[j], data[i]

    def reverse(self) -> None:
        self._check("reverse").reverse()

    def sort(self, *, key: Optional[Callable[[A], Any]] = None, reverse: bool = False) -> None:
        self._check("sort").sort(key=key, reverse=reverse)
