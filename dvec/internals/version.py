from __future__ import annotations
import sys, platform, datetime

from dvec import __version__ as app_ver, __dev__ as is_dev

def _ensure_utf8_stdout() -> None:
    try:
        sys.stdout.reconfigure(encoding="utf-8")  # py3.7+
    except Exception:
        pass

def _get_versions() -> dict[str, str]:
    return {
        "app": app_ver,
        "python": platform.python_version(),
        "implementation": platform.python_implementation(),
    }

def banner(use_ansi: bool) -> str:
    v = _get_versions()
    today = datetime.date.today().isoformat()

    if use_ansi:
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    dev_marker = " (dev)" if is_dev else ""
    return (
        f"{BOLD}dvec - owned growable vectors{RESET} • {v['app']}{dev_marker}\n"
        f"{DIM}{v['implementation']} {v['python']} • {today}{RESET}\n"
    )

def print_banner(use_ansi: bool | None = None) -> None:
    _ensure_utf8_stdout()
    # Only use ANSI styling if stdout is a TTY (interactive terminal)
    if use_ansi is None:
        use_ansi = sys.stdout.isatty()
    print(banner(use_ansi))
