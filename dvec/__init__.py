"""dvec - growable vectors with a single owner and a reentrancy guard."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("dvec")
    __dev__ = False
except PackageNotFoundError:
    # Development mode - read from pyproject.toml
    import tomllib
    from pathlib import Path
    try:
        pyproject = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            __version__ = tomllib.load(f).get("project", {}).get("version", "unknown")
    except Exception:
        __version__ = "unknown"
    __dev__ = True

from dvec.cell import CellState, Vacancy
from dvec.checkout import Loan
from dvec.config import DVecSettings, configure, get_settings, load_settings
from dvec.dvec import DVec, from_elem, from_vec, unwrap
from dvec.internals.errors import (
    DVecError,
    EmptyContainer,
    IndexOutOfRange,
    InvalidContents,
    InvalidRange,
    MissingCapability,
    PoisonedContainer,
    ReentrantAccess,
    SettingsError,
    UseAfterMove,
)
from dvec.internals.report import Reporter
from dvec.views import PeekView, PokeView

__all__ = [
    "CellState",
    "DVec",
    "DVecError",
    "DVecSettings",
    "EmptyContainer",
    "IndexOutOfRange",
    "InvalidContents",
    "InvalidRange",
    "Loan",
    "MissingCapability",
    "PeekView",
    "PokeView",
    "PoisonedContainer",
    "ReentrantAccess",
    "Reporter",
    "SettingsError",
    "UseAfterMove",
    "Vacancy",
    "configure",
    "from_elem",
    "from_vec",
    "get_settings",
    "load_settings",
    "unwrap",
]
