"""Entry point for the mdview CLI."""

from __future__ import annotations

import argparse
import asyncio
import functools
import logging
import os
import shutil
import sys

from mdview.ansi import encode_document
from mdview.config import LOG_LEVELS, Config
from mdview.highlight import highlight_code
from mdview.pager import Pager, read_source
from mdview.render import render
from mdview.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdview", description="mdview: terminal markdown viewer")
    parser.add_argument("file", help="Markdown file to view")
    parser.add_argument("--dump", action="store_true", help="Write the rendered document to stdout and exit")
    parser.add_argument("-w", "--width", type=int, default=None, help="Render width in columns (default: terminal width)")
    parser.add_argument("--theme", default=None, help="Pygments style for code blocks (default: monokai)")
    parser.add_argument("--no-watch", action="store_true", help="Do not reload the file when it changes")
    parser.add_argument("--log-level", default=None, choices=list(LOG_LEVELS))
    return parser


def resolve_config(args: argparse.Namespace, config: Config | None = None) -> Config:
    """Layer command-line flags over *config* (the environment by default)."""
    config = config or Config.from_env()
    if args.width is not None:
        config.width = args.width
    if args.theme:
        config.code_theme = args.theme
    if args.no_watch:
        config.watch = False
    if args.log_level:
        config.log_level = args.log_level
    return config


def terminal_width() -> int:
    return shutil.get_terminal_size((DEFAULT_WIDTH, 24)).columns or DEFAULT_WIDTH


def dump(source: str, config: Config) -> str:
    width = config.width if config.width is not None else terminal_width()
    highlighter = functools.partial(highlight_code, style=config.code_theme)
    return encode_document(render(source, width, highlighter=highlighter))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width is not None and args.width < 1:
        parser.error("--width must be a positive integer")

    config = resolve_config(args)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        source = read_source(args.file)
    except OSError as exc:
        print(f"mdview: cannot read {args.file}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    if args.dump:
        sys.stdout.write(dump(source, config))
        return 0

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        print("mdview: interactive mode needs a terminal (use --dump)", file=sys.stderr)
        return 1

    logger.debug("Opening pager for %s", args.file)
    pager = Pager(ProcessTerminal(), source, path=os.path.abspath(args.file), config=config)
    try:
        asyncio.run(pager.run())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
