"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Converts a Markdown document into Confluence Storage Format (XHTML), rendering fenced code blocks as Confluence
`code` macros and expanding structured macro declarations.

Copyright 2022-2025, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import argparse
import logging
import os.path
import sys
from io import StringIO
from pathlib import Path
from typing import Sequence

from . import __version__
from .csf import ParseError, elements_from_string
from .environment import ArgumentError, get_language_file
from .fenced import FencedCodeOptions
from .languages import get_default_languages, load_languages
from .markdown import StorageFormatConverter


class Arguments(argparse.Namespace):
    mdpath: str | None
    output: str | None
    loglevel: str
    languages: str | None
    theme: str
    line_numbers: bool
    validate: bool


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.prog = os.path.basename(os.path.dirname(__file__))
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("mdpath", nargs="?", help="Path to Markdown file to convert (default: standard input).")
    parser.add_argument("-o", "--output", help="Path to Confluence Storage Format file to write (default: standard output).")
    parser.add_argument(
        "-l",
        "--loglevel",
        choices=[
            logging.getLevelName(level).lower()
            for level in (
                logging.DEBUG,
                logging.INFO,
                logging.WARN,
                logging.ERROR,
                logging.CRITICAL,
            )
        ],
        default=logging.getLevelName(logging.INFO),
        help="Use this option to set the log verbosity.",
    )
    parser.add_argument(
        "--languages",
        help="JSON file of language names and aliases that replaces the built-in list (default: $MARKDOWN2CONFLUENCE_LANGUAGES).",
    )
    parser.add_argument(
        "--theme",
        default="Confluence",
        help="Color theme for code blocks (default: 'Confluence').",
    )
    parser.add_argument(
        "--line-numbers",
        dest="line_numbers",
        action="store_true",
        default=True,
        help="Show line numbers in code blocks.",
    )
    parser.add_argument(
        "--no-line-numbers",
        dest="line_numbers",
        action="store_false",
        help="Hide line numbers in code blocks.",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        default=False,
        help="Check that the generated document is well-formed XML.",
    )
    return parser


def get_help() -> str:
    parser = get_parser()
    with StringIO() as buf:
        parser.print_help(file=buf)
        return buf.getvalue()


def main(argv: Sequence[str] | None = None) -> None:
    parser = get_parser()
    args = Arguments()
    parser.parse_args(argv, namespace=args)

    logging.basicConfig(
        level=getattr(logging, args.loglevel.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
    )

    try:
        language_file = get_language_file(args.languages)
    except ArgumentError as e:
        parser.error(str(e))

    languages = load_languages(language_file) if language_file is not None else get_default_languages()
    options = FencedCodeOptions(theme=args.theme, line_numbers=args.line_numbers)
    converter = StorageFormatConverter(languages, options)

    if args.mdpath is None or args.mdpath == "-":
        content = sys.stdin.read()
    else:
        with open(Path(args.mdpath), "r", encoding="utf-8") as f:
            content = f.read()

    storage = converter.convert(content)

    if args.validate:
        try:
            elements_from_string(storage)
        except ParseError as ex:
            logging.error("Generated document is not well-formed: %s", ex.__cause__)
            sys.exit(1)

    if args.output is None:
        sys.stdout.write(storage)
        sys.stdout.write("\n")
    else:
        with open(Path(args.output), "w", encoding="utf-8") as f:
            f.write(storage)
            f.write("\n")


if __name__ == "__main__":
    main()
