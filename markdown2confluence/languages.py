"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2025, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import functools
import importlib.resources as resources
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

import orjson
from cattrs import BaseValidationError

from .serializer import json_payload_to_object

LOGGER = logging.getLogger(__name__)

# language identifier Confluence falls back to when syntax highlighting is not available
DEFAULT_LANGUAGE = "plain"


@dataclass
class LanguageEntry:
    """
    A (programming) language recognized by the Confluence syntax highlighter.

    :param name: Identifier Confluence expects in the `language` parameter of a `code` macro.
    :param aliases: Names a user may type in the info string of a fenced code block to select the language.
    """

    name: str
    aliases: list[str]


class LanguageTable:
    """
    Maps language aliases to the canonical language names Confluence recognizes.

    A table is immutable once constructed. A table without a mapping (see `absent`) passes language tags through.
    """

    _aliases: Mapping[str, str] | None
    default: str

    def __init__(self, aliases: Mapping[str, str] | None, *, default: str = DEFAULT_LANGUAGE) -> None:
        """
        Creates a language table.

        :param aliases: Map of alias to canonical name, or `None` if no mapping is available.
        :param default: Language identifier to use for unrecognized aliases.
        """

        if aliases is not None:
            self._aliases = MappingProxyType({key.lower(): value for key, value in aliases.items()})
        else:
            self._aliases = None
        self.default = default

    @classmethod
    def from_entries(cls, entries: Iterable[LanguageEntry], *, default: str = DEFAULT_LANGUAGE) -> "LanguageTable":
        "Builds the reverse map alias to name from a list of languages."

        aliases: dict[str, str] = {}
        for entry in entries:
            for alias in entry.aliases:
                key = alias.lower()
                previous = aliases.get(key)
                if previous is not None and previous != entry.name:
                    LOGGER.debug("Alias %s re-assigned from language %s to %s", key, previous, entry.name)
                aliases[key] = entry.name
        return cls(aliases, default=default)

    @classmethod
    def absent(cls, *, default: str = DEFAULT_LANGUAGE) -> "LanguageTable":
        "A table that has no mapping, and returns language tags unchanged."

        return cls(None, default=default)

    @property
    def available(self) -> bool:
        "True if the table holds an alias mapping."

        return self._aliases is not None

    def __contains__(self, alias: object) -> bool:
        if self._aliases is None or not isinstance(alias, str):
            return False
        return alias.lower() in self._aliases

    def __len__(self) -> int:
        return len(self._aliases) if self._aliases is not None else 0

    def lookup(self, tag: str) -> str:
        """
        Resolves a language tag to the name the Confluence syntax highlighter expects.

        Unrecognized tags resolve to the default language; this is reported as a warning but is not an error.

        :param tag: Language tag as it appears in the info string of a fenced code block (case-insensitive).
        :returns: A non-empty language identifier.
        """

        key = tag.lower()
        if self._aliases is None:
            return key or self.default

        name = self._aliases.get(key)
        if name is not None:
            return name

        LOGGER.warning("Unsupported code block language: %s; using default %s", key, self.default)
        return self.default


def read_languages(path: Path) -> LanguageTable:
    """
    Reads a language alias dataset.

    The dataset is a JSON list of objects of the shape `{"name": "py", "aliases": ["py", "python"]}`.

    :param path: Path to a JSON file.
    :returns: A language table populated from the dataset.
    :raises OSError: Raised when the file cannot be read.
    :raises orjson.JSONDecodeError: Raised when the file is not valid JSON.
    :raises cattrs.BaseValidationError: Raised when the JSON data does not match the expected shape.
    """

    with open(path, "rb") as f:
        payload = f.read()
    entries = json_payload_to_object(list[LanguageEntry], payload)
    LOGGER.debug("Loaded %d languages from: %s", len(entries), path)
    return LanguageTable.from_entries(entries)


def load_languages(path: Path | None = None) -> LanguageTable:
    """
    Loads a language alias dataset, falling back to a table without mapping if the dataset is unusable.

    :param path: Path to a JSON file, or `None` to use the dataset shipped with the package.
    :returns: A language table; never raises.
    """

    try:
        if path is not None:
            return read_languages(path)

        resource_path = resources.files(__package__).joinpath("languages.json")
        with resources.as_file(resource_path) as languages_path:
            return read_languages(languages_path)
    except OSError as ex:
        LOGGER.error("Error reading language aliases: %s", ex)
    except orjson.JSONDecodeError as ex:
        LOGGER.error("Error parsing language aliases: %s", ex)
    except (BaseValidationError, TypeError) as ex:
        LOGGER.error("Invalid language alias data: %s", ex)

    return LanguageTable.absent()


@functools.cache
def get_default_languages() -> LanguageTable:
    "Returns the process-wide language table built from the dataset shipped with the package."

    return load_languages()
