# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn, Optional, Type

from dvec.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    BORROW    = "borrow"
    OWNERSHIP = "ownership"
    BOUNDS    = "bounds"
    CAPABILITY = "capability"
    CONFIG    = "config"
    RUNTIME   = "runtime"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]

    def __contains__(self, code: str) -> bool:
        return code in self._registry

    def codes(self) -> list[str]:
        return sorted(self._registry)


ERR = _ErrorCatalog(REGISTRY)


#
# --- Exception hierarchy
#

class DVecError(RuntimeError):
    """Base class for every fault raised by a dvec container.

    These are programmer errors. They carry the catalog code so callers
    and tooling can map them back to `ERR` entries.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class ReentrantAccess(DVecError):
    """The container was used while its storage was checked out."""


class PoisonedContainer(ReentrantAccess):
    """A transformation faulted while holding the storage; it never came back."""


class UseAfterMove(DVecError):
    """The contents were moved out by unwrap() or transfer()."""


class EmptyContainer(DVecError):
    """pop/shift/last on a zero-length sequence."""


class IndexOutOfRange(DVecError):
    """Index outside [0, len)."""


class InvalidRange(IndexOutOfRange):
    """Half-open slice bounds that do not fit the source sequence."""


class MissingCapability(DVecError):
    """Copy-bound operation on a container declared with move-only elements."""


class InvalidContents(DVecError):
    """Something other than a sequence was given back as the storage."""


class SettingsError(DVecError):
    """Invalid [tool.dvec] settings."""


# Code -> exception class raised for it
_EXCEPTIONS: Dict[str, Type[DVecError]] = {}


def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_runtime_error(code: str, reporter: Optional[Reporter] = None,
                        span: Optional[Span] = None, **kwargs) -> NoReturn:
    """Raise the exception mapped to a runtime error code.

    When a reporter is given, the fault is also recorded there as a
    diagnostic before the exception propagates.

    Args:
        code: Error code (e.g., "RE2030")
        reporter: Optional Reporter collecting fault diagnostics
        span: Call-site location attached to the diagnostic
        **kwargs: Format parameters for the error message

    Raises:
        DVecError: Always raises the subclass registered for `code`
    """
    msg = _get(code)
    text = _fmt(code, **kwargs)
    if reporter is not None:
        emit(reporter, msg, span, **kwargs)
    raise _EXCEPTIONS.get(code, DVecError)(code, text)

def exception_for(code: str) -> Type[DVecError]:
    _get(code)
    return _EXCEPTIONS.get(code, DVecError)


#
# --- Helpers
#

def _add(msg: ErrorMessage, exc: Optional[Type[DVecError]] = None) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg
    if exc is not None:
        _EXCEPTIONS[msg.code] = exc

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Bounds errors
_add(ErrorMessage("RE2020", Severity.ERROR,
    "index {index} out of bounds for length {length}",
    Category.BOUNDS, "Element access with index outside valid range [0, len). "
    "Negative indices are not accepted."), IndexOutOfRange)

# Checkout protocol
_add(ErrorMessage("RE2030", Severity.ERROR,
    "recursive use of dvec during {op}",
    Category.BORROW, "The container's storage is checked out by an enclosing operation "
    "(swap, borrow, traversal, ...). Nothing may touch the container until that "
    "operation gives the storage back."), ReentrantAccess)

_add(ErrorMessage("RE2031", Severity.ERROR,
    "dvec is poisoned: a transformation failed while holding its storage ({op})",
    Category.BORROW, "A callback raised while the storage was checked out. The partially "
    "transformed sequence cannot be validated, so the container stays inaccessible."),
    PoisonedContainer)

_add(ErrorMessage("RE2032", Severity.ERROR,
    "use of dvec after its contents were moved out ({op})",
    Category.OWNERSHIP, "unwrap() or transfer() consumed this handle. Use the returned "
    "list or the new container instead."), UseAfterMove)

_add(ErrorMessage("RE2033", Severity.ERROR,
    "{op}() called on an empty dvec",
    Category.BOUNDS, "pop(), shift() and last() need at least one element."), EmptyContainer)

_add(ErrorMessage("RE2034", Severity.ERROR,
    "slice [{start}, {stop}) out of range for source of length {length}",
    Category.BOUNDS, "push_slice() requires 0 <= start <= stop <= len(source)."), InvalidRange)

# Capability errors
_add(ErrorMessage("RE2035", Severity.ERROR,
    "'{op}' requires copyable elements",
    Category.CAPABILITY, "The container was created with copy_fn=None (move-only elements). "
    "get, get_elt, last, push_all, push_slice and grow_set_elt duplicate elements "
    "and are unavailable."), MissingCapability)

# Storage errors
_add(ErrorMessage("RE2036", Severity.ERROR,
    "{op} must leave a sequence as the contents, got {kind}",
    Category.OWNERSHIP, "give_back(), swap() callbacks and set() install their value as the "
    "storage. Any iterable is adopted as a list; None or a non-iterable is rejected "
    "(a common cause is returning the result of list.sort() from a swap callback)."),
    InvalidContents)

# Settings errors
_add(ErrorMessage("CE4001", Severity.ERROR,
    "invalid setting '{key}' = {value!r} in {source}: expected one of {allowed}",
    Category.CONFIG, "The [tool.dvec] table (or dvec.toml) holds an unsupported value."),
    SettingsError)

_add(ErrorMessage("CE4002", Severity.WARNING,
    "unknown setting '{key}' in {source} ignored",
    Category.CONFIG, "Keys other than 'copy' and 'color' have no effect."))
