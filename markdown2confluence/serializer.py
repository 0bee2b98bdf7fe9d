"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from typing import TypeVar

import orjson
from cattrs.preconf.orjson import make_converter  # spellchecker:disable-line

JsonType = None | bool | int | float | str | dict[str, "JsonType"] | list["JsonType"]

T = TypeVar("T")


_converter = make_converter(forbid_extra_keys=False)


def json_to_object(typ: type[T], data: JsonType) -> T:
    """
    Converts a raw JSON object to a structured object, validating input data.

    :param typ: Target structured type.
    :param data: Source data as a JSON object.
    :returns: A valid object instance of the expected type.
    """

    return _converter.structure(data, typ)


def json_payload_to_object(typ: type[T], payload: bytes | str) -> T:
    """
    Parses a JSON string and converts the result to a structured object, validating input data.

    :param typ: Target structured type.
    :param payload: JSON string, optionally encoded in UTF-8.
    :returns: A valid object instance of the expected type.
    :raises orjson.JSONDecodeError: Raised when the payload is not valid JSON.
    """

    return json_to_object(typ, orjson.loads(payload))
