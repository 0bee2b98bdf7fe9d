"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Parses Markdown files, renders fenced code blocks as Confluence `code` macros, and expands blocks that declare a
structured macro in a compact line-oriented notation.
"""

from ._version import __version__

__all__ = ["__version__"]

__author__ = "Levente Hunyadi"
__copyright__ = "Copyright 2022-2025, Levente Hunyadi"
__license__ = "MIT"
__maintainer__ = "Levente Hunyadi"
__status__ = "Production"
