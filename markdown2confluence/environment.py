"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import os
from pathlib import Path


class ArgumentError(ValueError):
    "Raised when wrong arguments are passed to a function call."


LANGUAGES_ENV_VAR = "MARKDOWN2CONFLUENCE_LANGUAGES"


def _validate_language_file(path: Path) -> Path:
    if not path.is_file():
        raise ArgumentError(f"language alias file not found: {path}")

    return path


def get_language_file(path: str | Path | None = None) -> Path | None:
    """
    Returns the path to a language alias dataset that replaces the bundled one.

    Priority:
    1. Path passed explicitly (e.g. on the command line)
    2. MARKDOWN2CONFLUENCE_LANGUAGES environment variable
    3. None, which selects the dataset shipped with the package

    :raises ArgumentError: Raised when the path given does not refer to an existing file.
    """

    if path is not None:
        return _validate_language_file(Path(path))

    env_path = os.getenv(LANGUAGES_ENV_VAR)
    if env_path:
        return _validate_language_file(Path(env_path))

    return None
