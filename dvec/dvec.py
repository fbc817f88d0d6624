"""
Dynamic vector.

A growable list owned by exactly one handle, so it can be handed between
workers without leaving aliases behind.

Limitations on recursive use:
The list is swapped out of the container whenever an operation needs to
own it (pop, shift, reverse, borrow, traversal, ...). While it is out,
any other use of the same container fails with ReentrantAccess. That is,
while iterating with rev_each() you cannot touch the container in any other
way. swap() gives raw access to the list to transform it however you like.

Operations:
- Fast path (check_not_borrowed): len, push, set, get_elt, set_elt, last, reserve
- Full checkout: pop, shift, unshift, reverse, borrow, borrow_mut,
  push_slice, append_iter, get, grow_set_elt, each/rev_each
- Ownership: unwrap, transfer

Copy-bound operations duplicate elements through the container's copy_fn
(copy.deepcopy unless configured otherwise) and are unavailable when the
container was created with copy_fn=None.
"""
from __future__ import annotations
import operator
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from dvec.checkout import CheckoutProtocol
from dvec.config import get_settings
from dvec.internals.report import Reporter
from dvec.views import PeekView, PokeView

A = TypeVar("A")
R = TypeVar("R")

CopyFn = Optional[Callable[[Any], Any]]

# copy_fn default: resolved from settings at construction time
_FROM_SETTINGS: Any = object()


class DVec(CheckoutProtocol[A]):
    """A growable, modifiable list that accumulates elements in one owned buffer."""

    # Traversal goes through each()/rev_each(); iter(d) would bypass checkout
    __iter__ = None

    def __init__(
        self,
        contents: Optional[Iterable[A]] = None,
        *,
        copy_fn: CopyFn = _FROM_SETTINGS,
        reporter: Optional[Reporter] = None,
    ) -> None:
        if contents is None:
            contents = []
        elif not isinstance(contents, list):
            contents = list(contents)
        super().__init__(contents, reporter)
        self._copy_fn: CopyFn = get_settings().copy_fn if copy_fn is _FROM_SETTINGS else copy_fn
        self._capacity_hint = 0

    @property
    def copyable(self) -> bool:
        return self._copy_fn is not None

    def _copier(self, what: str) -> Callable[[Any], Any]:
        if self._copy_fn is None:
            self._fault("RE2035", op=what)
        return self._copy_fn

    def _index(self, idx: int, length: int) -> int:
        i = operator.index(idx)
        if not 0 <= i < length:
            self._fault("RE2020", index=i, length=length)
        return i

    # --- capacity / length

    def reserve(self, count: int) -> None:
        """Reserves space for `count` elements (a hint; Python lists grow on their own)."""
        self.check_not_borrowed("reserve")
        self._capacity_hint = max(self._capacity_hint, operator.index(count))

    def capacity(self) -> int:
        return max(self._capacity_hint, len(self.check_not_borrowed("capacity")))

    def len(self) -> int:
        """Returns the number of elements currently in the dvec."""
        return len(self.check_not_borrowed("len"))

    def __len__(self) -> int:
        return self.len()

    def is_empty(self) -> bool:
        return not self.check_not_borrowed("is_empty")

    # --- whole-contents operations

    def set(self, w: Iterable[A]) -> None:
        """Overwrite the current contents; the container takes ownership of `w`."""
        self.check_not_borrowed("set")
        self.give_back(w, what="set")

    def get(self) -> List[A]:
        """Gets a copy of the current contents.

        See unwrap() if you do not wish to copy the contents.
        """
        self.check_not_borrowed("get")
        dup = self._copier("get")

        def _copy_out(v: List[A]) -> List[A]:
            w = [dup(e) for e in v]
            self.give_back(v)
            return w

        return self.check_out(_copy_out, what="get")

    def reverse(self) -> None:
        """Reverse the elements in place."""
        with self.checkout(what="reverse") as loan:
            loan.contents.reverse()

    # --- ends of the list

    def push(self, t: A) -> None:
        self.check_not_borrowed("push").append(t)

    def pop(self) -> A:
        """Remove and return the last element."""
        def _pop(v: List[A]) -> A:
            if not v:
                self.give_back(v)
                self._fault("RE2033", op="pop")
            result = v.pop()
            self.give_back(v)
            return result

        return self.check_out(_pop, what="pop")

    def shift(self) -> A:
        """Remove and return the first element."""
        def _shift(v: List[A]) -> A:
            if not v:
                self.give_back(v)
                self._fault("RE2033", op="shift")
            result = v.pop(0)
            self.give_back(v)
            return result

        return self.check_out(_shift, what="shift")

    def unshift(self, t: A) -> None:
        """Insert a single item at the front of the list. O(n): the list is rebuilt."""
        data = self._take("unshift")
        fresh = [t]
        fresh.extend(data)
        self.give_back(fresh)

    def last(self) -> A:
        """Returns a copy of the last element, failing if the dvec is empty."""
        data = self.check_not_borrowed("last")
        dup = self._copier("last")
        if not data:
            self._fault("RE2033", op="last")
        return dup(data[-1])

    # --- bulk append

    def push_all(self, ts: Sequence[A]) -> None:
        """Append copies of all elements of `ts` to the end of the list."""
        self.push_slice(ts, 0, len(ts))

    def push_slice(self, ts: Sequence[A], from_idx: int, to_idx: int) -> None:
        """Appends copies of ts[from_idx:to_idx] (to_idx exclusive)."""
        self.check_not_borrowed("push_slice")
        dup = self._copier("push_slice")
        start, stop = operator.index(from_idx), operator.index(to_idx)
        length = len(ts)
        if not 0 <= start <= stop <= length:
            self._fault("RE2034", start=start, stop=stop, length=length)

        def _append(v: List[A]) -> List[A]:
            self._capacity_hint = max(self._capacity_hint, len(v) + stop - start)
            for i in range(start, stop):
                v.append(dup(ts[i]))
            return v

        self.swap(_append, what="push_slice")

    def append_iter(self, ts: Iterable[A]) -> None:
        """
        Append all elements of an iterable.

        Failure will occur if the iterable touches this dvec while it is
        being consumed.
        """
        def _extend(v: List[A]) -> List[A]:
            hint = operator.length_hint(ts)
            if hint:
                self._capacity_hint = max(self._capacity_hint, len(v) + hint)
            for t in ts:
                v.append(t)
            return v

        self.swap(_extend, what="append_iter")

    # --- element access

    def get_elt(self, idx: int) -> A:
        """Copy out an individual element."""
        data = self.check_not_borrowed("get_elt")
        dup = self._copier("get_elt")
        return dup(data[self._index(idx, len(data))])

    def __getitem__(self, idx: int) -> A:
        return self.get_elt(idx)

    def set_elt(self, idx: int, a: A) -> None:
        """Overwrites the element at `idx` with `a`."""
        data = self.check_not_borrowed("set_elt")
        data[self._index(idx, len(data))] = a

    def grow_set_elt(self, idx: int, initval: A, val: A) -> None:
        """
        Overwrites the element at `idx` with `val`, growing the dvec if
        necessary. New elements are initialized with copies of `initval`.
        """
        length = len(self.check_not_borrowed("grow_set_elt"))
        dup = self._copier("grow_set_elt")
        i = operator.index(idx)
        if i < 0:
            self._fault("RE2020", index=i, length=length)

        def _grow(v: List[A]) -> List[A]:
            if i < len(v):
                v[i] = val
                return v
            missing = i - len(v)
            v.extend(dup(initval) for _ in range(missing))
            v.append(val)
            return v

        self.swap(_grow, what="grow_set_elt")

    # --- scoped access

    def borrow(self, op: Callable[[PeekView[A]], R]) -> R:
        """Gives `op` read-only access to the contents."""
        with self.checkout(what="borrow") as loan:
            view = PeekView(loan.contents)
            try:
                return op(view)
            finally:
                view._release()

    def borrow_mut(self, op: Callable[[PokeView[A]], R]) -> R:
        """Gives `op` access to the contents with mutable elements (fixed length)."""
        with self.checkout(what="borrow_mut") as loan:
            view = PokeView(loan.contents)
            try:
                return op(view)
            finally:
                view._release()

    # --- traversal; `f` returns a falsy value to stop early

    def each(self, f: Callable[[A], Any]) -> None:
        def _walk(v: List[A]) -> List[A]:
            for e in v:
                if not f(e):
                    break
            return v

        self.swap(_walk, what="each")

    def eachi(self, f: Callable[[int, A], Any]) -> None:
        def _walk(v: List[A]) -> List[A]:
            for i, e in enumerate(v):
                if not f(i, e):
                    break
            return v

        self.swap(_walk, what="eachi")

    def rev_each(self, f: Callable[[A], Any]) -> None:
        """Iterates over the elements in reverse order."""
        def _walk(v: List[A]) -> List[A]:
            for e in reversed(v):
                if not f(e):
                    break
            return v

        self.swap(_walk, what="rev_each")

    def rev_eachi(self, f: Callable[[int, A], Any]) -> None:
        """Iterates over the elements and indices in reverse order."""
        def _walk(v: List[A]) -> List[A]:
            for i in range(len(v) - 1, -1, -1):
                if not f(i, v[i]):
                    break
            return v

        self.swap(_walk, what="rev_eachi")

    # --- ownership

    def unwrap(self) -> List[A]:
        """Consumes the dvec and returns its list, without copying."""
        return self._move_out("unwrap")

    def transfer(self) -> "DVec[A]":
        """Move the contents into a new handle; this one becomes unusable."""
        hint = self._capacity_hint
        moved = type(self)(self._move_out("transfer"), copy_fn=self._copy_fn, reporter=self._reporter)
        moved._capacity_hint = hint
        return moved

    def __copy__(self):
        raise TypeError("DVec is move-only; use get() for a copy or transfer() to move it")

    def __deepcopy__(self, memo):
        raise TypeError("DVec is move-only; use get() for a copy or transfer() to move it")

    def __repr__(self) -> str:
        contents = self._cell.contents
        if isinstance(contents, list):
            return f"DVec({contents!r})"
        return f"<DVec {self.state.value}>"


def from_elem(e: A, *, copy_fn: CopyFn = _FROM_SETTINGS, reporter: Optional[Reporter] = None) -> DVec[A]:
    """Creates a new dvec with a single element."""
    return DVec([e], copy_fn=copy_fn, reporter=reporter)


def from_vec(v: Iterable[A], *, copy_fn: CopyFn = _FROM_SETTINGS, reporter: Optional[Reporter] = None) -> DVec[A]:
    """Creates a new dvec that takes ownership of `v` (a list is adopted as-is)."""
    return DVec(v, copy_fn=copy_fn, reporter=reporter)


def unwrap(d: DVec[A]) -> List[A]:
    """Consumes the dvec and returns its contents."""
    return d.unwrap()
