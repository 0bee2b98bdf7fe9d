"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2025, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import io
import logging
from typing import Any

import markdown

from .fenced import FencedBlock, FencedCodeOptions, FencedCodeRenderer
from .languages import LanguageTable

LOGGER = logging.getLogger(__name__)


class StorageFormatConverter:
    """
    Converts Markdown documents into Confluence Storage Format with Python-Markdown.

    Every fenced code block (with any language tag, or none) is rendered by a `FencedCodeRenderer`; the rest of
    the document is emitted as XHTML.
    """

    renderer: FencedCodeRenderer

    def __init__(self, languages: LanguageTable | None = None, options: FencedCodeOptions | None = None) -> None:
        self.renderer = FencedCodeRenderer(languages, options)
        self._converter = markdown.Markdown(
            extensions=[
                "footnotes",
                "markdown.extensions.tables",
                "md_in_html",
                "pymdownx.highlight",  # required by `pymdownx.superfences`
                "pymdownx.superfences",
                "pymdownx.tilde",
                "sane_lists",
            ],
            extension_configs={
                "footnotes": {"BACKLINK_TITLE": ""},
                "pymdownx.highlight": {
                    "use_pygments": False,
                },
                "pymdownx.superfences": {
                    # name `*` replaces the default formatter for all fenced code blocks
                    "custom_fences": [{"name": "*", "class": "confluence", "format": self._fence_formatter}],
                },
            },
            output_format="xhtml",
        )

        # emit macros as top-level raw blocks rather than wrapping them in a paragraph
        self._converter.block_level_elements.append("ac:structured-macro")

    def _fence_formatter(
        self,
        source: str,
        language: str,
        css_class: str,
        options: dict[str, Any],
        md: markdown.Markdown,
        **kwargs: Any,
    ) -> str:
        """
        Custom formatter for all languages in `pymdownx.superfences`.
        """

        block = FencedBlock.from_source(source, language)
        LOGGER.debug("Found fenced code block with language: %s", block.language)

        with io.StringIO() as out:
            self.renderer.open(block, out)
            self.renderer.close(block, out)
            return out.getvalue()

    def convert(self, content: str) -> str:
        """
        Converts a Markdown document into Confluence Storage Format.

        :param content: Markdown input as a string.
        :returns: Confluence Storage Format (XHTML) output as a string.
        :see: https://python-markdown.github.io/
        """

        self._converter.reset()
        return self._converter.convert(content)


def markdown_to_storage(content: str, languages: LanguageTable | None = None, options: FencedCodeOptions | None = None) -> str:
    """
    Converts a Markdown document into Confluence Storage Format.

    :param content: Markdown input as a string.
    :param languages: Language alias table; defaults to the table shipped with the package.
    :param options: Options that control how fenced code blocks are rendered.
    :returns: Confluence Storage Format (XHTML) output as a string.
    """

    return StorageFormatConverter(languages, options).convert(content)
