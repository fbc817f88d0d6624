"""
Checkout protocol: the only gateway between a StorageCell and the
operations built on top of it.

Two paths exist:

- check_not_borrowed(): a cheap test for O(1) operations (len, push,
  indexed access) that read or mutate the list in place.
- check_out()/give_back(), swap() and the scoped checkout() guard: for
  anything that needs to own the whole list for a while (resizing,
  reordering, callbacks). The cell holds Vacancy.CHECKED_OUT for the entire
  transformation, so a nested call on the same container is detected.

If a transformation raises while the list is still checked out, the cell is
poisoned and stays that way. The partially transformed list is dropped;
nothing tries to repair it.
"""
from __future__ import annotations
from collections.abc import Iterable
from contextlib import contextmanager
from typing import Callable, Dict, Generic, Iterator, List, NoReturn, Optional, TypeVar

from dvec.cell import CellState, StorageCell, Vacancy
from dvec.internals import errors as er
from dvec.internals.report import Reporter, span_of_caller

A = TypeVar("A")
B = TypeVar("B")

# Vacancy -> runtime error code raised when an operation runs into it
_VACANCY_CODES: Dict[Vacancy, str] = {
    Vacancy.CHECKED_OUT: "RE2030",
    Vacancy.POISONED: "RE2031",
    Vacancy.CONSUMED: "RE2032",
}


class Loan(Generic[A]):
    """Exclusive access to a checked-out list, yielded by checkout().

    The holder may mutate `contents` or rebind it to a new list; whatever
    `contents` refers to at the end of the block is given back.
    """

    __slots__ = ("_contents", "_live")

    def __init__(self, contents: List[A]) -> None:
        self._contents = contents
        self._live = True

    @property
    def contents(self) -> List[A]:
        if not self._live:
            er.raise_runtime_error("RE2032", op="loan")
        return self._contents

    @contents.setter
    def contents(self, value: List[A]) -> None:
        if not self._live:
            er.raise_runtime_error("RE2032", op="loan")
        self._contents = value if isinstance(value, list) else list(value)

    def _release(self) -> List[A]:
        contents = self._contents
        self._live = False
        self._contents = []
        return contents


class CheckoutProtocol(Generic[A]):

    def __init__(self, contents: List[A], reporter: Optional[Reporter] = None) -> None:
        self._cell: StorageCell[A] = StorageCell(contents)
        self._reporter = reporter

    @property
    def state(self) -> CellState:
        return self._cell.state

    @property
    def is_poisoned(self) -> bool:
        return self._cell.vacancy is Vacancy.POISONED

    def _fault(self, code: str, **kwargs) -> NoReturn:
        span = span_of_caller() if self._reporter is not None else None
        er.raise_runtime_error(code, self._reporter, span, **kwargs)

    def check_not_borrowed(self, what: str = "access") -> List[A]:
        """Fail unless the list is present; return it for direct use."""
        contents = self._cell.contents
        if isinstance(contents, Vacancy):
            self._fault(_VACANCY_CODES[contents], op=what)
        return contents

    def _take(self, what: str, replacement: Vacancy = Vacancy.CHECKED_OUT) -> List[A]:
        vacancy = self._cell.vacancy
        if vacancy is not None:
            self._fault(_VACANCY_CODES[vacancy], op=what)
        return self._cell.take(replacement)

    def check_out(self, f: Callable[[List[A]], B], *, what: str = "check_out") -> B:
        """Swap the list out and hand it to `f`.

        `f` (or its caller) must give_back() a list before anyone else uses
        the container. If `f` raises before doing so, the container is
        poisoned.
        """
        data = self._take(what)
        try:
            return f(data)
        except BaseException:
            self._cell.poison()
            raise

    def give_back(self, data: Iterable[A], *, what: str = "give_back") -> None:
        """Install `data` as the contents. Iterables other than a list are adopted as a list."""
        if not isinstance(data, list):
            if not isinstance(data, Iterable):
                self._fault("RE2036", op=what, kind=type(data).__name__)
            data = list(data)
        self._cell.put(data)

    def swap(self, f: Callable[[List[A]], List[A]], *, what: str = "swap") -> None:
        """
        Swaps out the current list and hands it off to `f`, which returns
        the list to store in its place.
        """
        self.check_out(lambda v: self.give_back(f(v), what=what), what=what)

    @contextmanager
    def checkout(self, *, what: str = "checkout") -> Iterator[Loan[A]]:
        loan = Loan(self._take(what))
        try:
            yield loan
        except BaseException:
            loan._release()
            self._cell.poison()
            raise
        self.give_back(loan._release(), what=what)

    def _move_out(self, what: str) -> List[A]:
        return self._take(what, Vacancy.CONSUMED)
