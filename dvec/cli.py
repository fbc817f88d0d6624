"""dvec CLI - browse the error catalog and inspect settings."""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dvec.internals.report import C


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dvec",
        description="dvec - owned growable vectors",
    )
    parser.add_argument(
        "--version", action="store_true", help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    # dvec codes
    codes_parser = subparsers.add_parser("codes", help="List every error code")
    codes_parser.add_argument("--category", default=None, help="Only codes of this category")

    # dvec explain <code>
    explain_parser = subparsers.add_parser("explain", help="Explain an error code")
    explain_parser.add_argument("code", help="Error code, e.g. RE2030")

    # dvec config [dir]
    config_parser = subparsers.add_parser("config", help="Show effective settings")
    config_parser.add_argument("directory", nargs="?", default=None,
                               help="Directory holding dvec.toml or pyproject.toml (default: cwd)")

    return parser


def _use_color(directory: Optional[Path] = None) -> bool:
    from dvec.config import load_settings
    return load_settings(directory).use_color(sys.stdout.isatty())


def cmd_codes(args: argparse.Namespace) -> int:
    from dvec.internals.errors import ERR

    color = _use_color()
    for code in ERR.codes():
        msg = ERR[code]
        if args.category and msg.category.value != args.category:
            continue
        shown = f"{C.BOLD}{code}{C.RESET}" if color else code
        print(f"{shown}  {msg.severity.value:<7} {msg.category.value:<10} {msg.text}")
    return 0


def cmd_explain(args: argparse.Namespace) -> int:
    from dvec.internals.errors import ERR, exception_for

    code = args.code.upper()
    if code not in ERR:
        print(f"Error: unknown error code: {args.code}", file=sys.stderr)
        return 2

    msg = ERR[code]
    color = _use_color()
    head = f"{C.BOLD}{code}{C.RESET}" if color else code
    print(f"{head} [{msg.severity.value}, {msg.category.value}]")
    print(f"  message:   {msg.text}")
    print(f"  exception: {exception_for(code).__name__}")
    if msg.doc:
        print()
        print(f"  {msg.doc}")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    from dvec.config import load_settings
    from dvec.internals.report import Reporter

    reporter = Reporter()
    directory = Path(args.directory) if args.directory else None
    settings = load_settings(directory, reporter=reporter)
    reporter.print(use_color=settings.use_color(sys.stderr.isatty()))

    print(f"source: {settings.source}")
    print(f"copy:   {settings.copy}")
    print(f"color:  {settings.color}")
    return 0


def run(args: argparse.Namespace) -> int:
    if args.version:
        from dvec.internals.version import print_banner
        print_banner()
        return 0

    if args.command is None:
        build_parser().print_help()
        return 0

    if args.command == "codes":
        return cmd_codes(args)

    if args.command == "explain":
        return cmd_explain(args)

    if args.command == "config":
        return cmd_config(args)

    return 0


def cli_main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
