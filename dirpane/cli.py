"""Command-line front door for dirpane.

Parses CLI options, merges them over the config file, sets up logging,
and hands off to the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import config
from .app import run_browser
from .render import RenderOptions
from .theme import available_theme_names, resolve_theme

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: str | None, debug: bool) -> None:
    """Send package logs to ``log_file``; without one, logging stays silent.

    The terminal belongs to the UI, so no stream handler is ever attached.
    """
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("dirpane")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirpane",
        description="Browse a directory tree and preview files in the terminal.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to browse. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name for file contents.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the flattened tree and exit.")
    parser.add_argument("--log-file", default=None, help="Write diagnostic logs to this file.")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level (needs --log-file).")
    return parser


def resolve_render_options(args: argparse.Namespace) -> RenderOptions:
    """Combine CLI flags with config values; flags win."""
    color = config.load_color_enabled() and not args.no_color
    theme_name = args.theme if args.theme is not None else config.load_theme_name()
    return RenderOptions(
        theme=resolve_theme(theme_name, no_color=not color),
        style=args.style if args.style is not None else config.load_style(),
        color=color,
        tree_percent=config.load_tree_percent(),
    )


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the browser; returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.debug)

    root: Path | None = None
    if args.path is not None:
        root = Path(args.path).absolute()
        if not root.is_dir():
            raise SystemExit(f"Not a directory: {args.path}")

    return run_browser(root, resolve_render_options(args), print_only=args.print_only)


if __name__ == "__main__":
    raise SystemExit(main())
