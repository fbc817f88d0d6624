from __future__ import annotations
import linecache
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"
    GRAY  = "\x1b[90m"

@dataclass
class Span:
    line: int
    col: int
    end_line: int
    end_col: int
    filename: Optional[str] = None

@dataclass
class Diagnostic:
    kind: str
    code: str
    message: str
    span: Optional[Span] = None
    filename: Optional[str] = None

def _is_internal(module_name: str) -> bool:
    # contextlib frames sit between checkout() and the caller's with-statement
    return module_name in ("dvec", "contextlib") or module_name.startswith("dvec.")

def span_of_caller() -> Optional[Span]:
    """Locate the first stack frame outside the dvec package.

    Faults are reported against the user's call site, not against the
    container internals that detected them.
    """
    frame = sys._getframe(1)
    while frame is not None and _is_internal(frame.f_globals.get("__name__", "")):
        frame = frame.f_back
    if frame is None:
        return None
    summary = traceback.extract_stack(frame, limit=1)[-1]
    line = summary.lineno or 0
    colno = getattr(summary, "colno", None) or 0
    end_colno = getattr(summary, "end_colno", None) or colno
    return Span(line, colno + 1, getattr(summary, "end_lineno", None) or line,
                end_colno, filename=summary.filename)


class Reporter:
    def __init__(self, filename: str = "<input>") -> None:
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span]):
        self.items.append(Diagnostic("error", code, msg, span, filename=self._filename_of(span)))

    def warn(self, code: str, msg: str, span: Optional[Span]):
        self.items.append(Diagnostic("warning", code, msg, span, filename=self._filename_of(span)))

    def _filename_of(self, span: Optional[Span]) -> str:
        if span is not None and span.filename:
            return span.filename
        return self.filename

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def codes(self) -> List[str]:
        return [d.code for d in self.items]

    def clear(self) -> None:
        self.items.clear()

    def format(self, use_color: bool = True, use_unicode: bool = True) -> str:
        """Render all diagnostics.

        use_color   → ANSI colorize location/kind/markers
        use_unicode → use │ / ╰ / ╯ guides instead of the ASCII fallback
        """
        out: List[str] = []

        for d in self.items:
            filename = d.filename or self.filename
            try:
                rel_path = Path(filename).resolve().relative_to(Path.cwd())
                shown = f"./{rel_path}"
            except (ValueError, OSError):
                shown = Path(filename).name or filename

            loc = f"{shown}:{d.span.line}:{d.span.col}" if d.span else shown

            # Ensure message ends with period
            message = d.message if d.message.endswith('.') else f"{d.message}."

            if use_color:
                kind = f"{C.BOLD}{C.RED}error{C.RESET}" if d.kind == "error" else f"{C.BOLD}{C.YELLOW}warning{C.RESET}"
                head = f"{C.CYAN}{loc}{C.RESET}: {kind} [{C.DIM}{d.code}{C.RESET}]: {message}"
            else:
                head = f"{loc}: {d.kind} [{d.code}]: {message}"

            if d.span is None:
                out.append(head)
                continue

            line_text = linecache.getline(filename, d.span.line).rstrip("\n")
            start = max(1, d.span.col)
            width = max(1, d.span.end_col - start + 1) if d.span.end_line == d.span.line else 1

            if use_unicode:
                marker_color = C.RED if d.kind == "error" else C.YELLOW
                gray = (lambda s: f"{C.GRAY}{s}{C.RESET}") if use_color else (lambda s: s)
                marker = " " * (start - 1) + "┯" + "━" * (width - 1)
                if use_color:
                    marker = f"{marker_color}{marker}{C.RESET}"
                out.append(f"{gray('  ╭──┤ ')}{head}")
                out.append(f"{gray('  │')} {line_text}")
                out.append(f"{gray('  │')} {marker}")
                out.append(f"{gray('  ╰' + '─' * start + '╯')}")
            else:
                out.append(head)
                out.append(f"  | {line_text}")
                out.append(f"  ` {' ' * (start - 1) + '^' * width}")

        return "\n".join(out)

    def print(self, stream=None, use_color: Optional[bool] = None, use_unicode: Optional[bool] = None) -> None:
        """Print diagnostics to `stream` (default: sys.stderr).

        Color follows the `color` setting; under "auto" it is enabled for TTY
        unless NO_COLOR or TERM=dumb.
        Unicode guides are auto-enabled for TTY unless NO_UNICODE or TERM=dumb.
        """
        stream = stream or sys.stderr
        is_tty = getattr(stream, "isatty", lambda: False)()
        dumb = os.getenv("TERM") == "dumb"

        if use_color is None:
            from dvec.config import get_settings
            use_color = get_settings().use_color(
                bool(is_tty and os.getenv("NO_COLOR") is None and not dumb))
        if use_unicode is None:
            use_unicode = bool(is_tty and os.getenv("NO_UNICODE") is None and not dumb)

        if self.items:
            print(self.format(use_color=use_color, use_unicode=use_unicode), file=stream)
