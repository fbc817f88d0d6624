"""dvec settings ([tool.dvec] in pyproject.toml, or dvec.toml) loading and validation."""
from __future__ import annotations

import copy
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from dvec.internals import errors as er
from dvec.internals.report import Reporter

SETTINGS_NAME = "dvec.toml"
PYPROJECT_NAME = "pyproject.toml"

COPY_MODES = ("deep", "shallow", "none")
COLOR_MODES = ("auto", "always", "never")

_COPIERS: dict[str, Optional[Callable[[Any], Any]]] = {
    "deep": copy.deepcopy,
    "shallow": copy.copy,
    "none": None,
}


@dataclass(frozen=True)
class DVecSettings:
    copy: str = "deep"
    color: str = "auto"
    source: str = "<defaults>"

    def validate(self) -> None:
        if self.copy not in COPY_MODES:
            er.raise_runtime_error("CE4001", key="copy", value=self.copy,
                                   source=self.source, allowed=", ".join(COPY_MODES))
        if self.color not in COLOR_MODES:
            er.raise_runtime_error("CE4001", key="color", value=self.color,
                                   source=self.source, allowed=", ".join(COLOR_MODES))

    @property
    def copy_fn(self) -> Optional[Callable[[Any], Any]]:
        """Duplicate function handed to new containers (None = move-only)."""
        return _COPIERS[self.copy]

    def use_color(self, is_tty: bool) -> bool:
        if self.color == "always":
            return True
        if self.color == "never":
            return False
        return is_tty


def load_settings(directory: Path | None = None, reporter: Optional[Reporter] = None) -> DVecSettings:
    """Load settings from dvec.toml, then [tool.dvec] in pyproject.toml (default: cwd).

    Missing files yield the defaults.
    """
    if directory is None:
        directory = Path.cwd()

    settings_path = directory / SETTINGS_NAME
    if settings_path.exists():
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
        return _parse_settings(data, str(settings_path), reporter)

    pyproject_path = directory / PYPROJECT_NAME
    if pyproject_path.exists():
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        table = data.get("tool", {}).get("dvec")
        if table is not None:
            return _parse_settings(table, f"{pyproject_path} [tool.dvec]", reporter)

    return DVecSettings()


def load_settings_from_string(text: str, reporter: Optional[Reporter] = None) -> DVecSettings:
    """Load settings from a dvec.toml-style TOML string."""
    return _parse_settings(tomllib.loads(text), "<string>", reporter)


def _parse_settings(data: dict, source: str, reporter: Optional[Reporter]) -> DVecSettings:
    for key in data:
        if key not in ("copy", "color") and reporter is not None:
            er.emit(reporter, er.ERR.CE4002, None, key=key, source=source)
    settings = DVecSettings(
        copy=data.get("copy", "deep"),
        color=data.get("color", "auto"),
        source=source,
    )
    settings.validate()
    return settings


_active: Optional[DVecSettings] = None


def get_settings() -> DVecSettings:
    """Settings of the working directory, loaded once and cached."""
    global _active
    if _active is None:
        _active = load_settings()
    return _active


def configure(settings: Optional[DVecSettings]) -> None:
    """Override the cached settings (None re-reads them on next use)."""
    global _active
    if settings is not None:
        settings.validate()
    _active = settings
