"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2025, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import html
import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, TextIO

from .languages import LanguageTable, get_default_languages

LOGGER = logging.getLogger(__name__)

# language tag that marks a fenced code block as a structured macro declaration
MACRO_LANGUAGE = "CONFLUENCE-MACRO"

# keys that produce a body element (rather than an attribute) when not indented
MACRO_CONTENT_KEYS = frozenset(["plain-text-body", "rich-text-body"])


@dataclass(frozen=True)
class FencedBlock:
    """
    A fenced code block in a Markdown document.

    :param lines: Lines of text between the opening and closing fence, without line terminators.
    :param language: Language tag in the info string of the opening fence, or `None` if absent.
    """

    lines: tuple[str, ...]
    language: str | None = None

    @classmethod
    def from_source(cls, source: str, language: str | None = None) -> "FencedBlock":
        "Splits the text of a fenced code block into lines at line feeds."

        lines = tuple(source.removesuffix("\n").split("\n")) if source else ()
        return cls(lines, language or None)


@dataclass
class FencedCodeOptions:
    """
    Options that control how fenced code blocks are rendered.

    :param macro_language: Language tag (case-sensitive) that selects structured macro declaration mode.
    :param content_keys: Unindented keys in a macro declaration that become body elements.
    :param theme: Color theme of the Confluence `code` macro.
    :param line_numbers: Whether the Confluence `code` macro shows line numbers.
    """

    macro_language: str = MACRO_LANGUAGE
    content_keys: frozenset[str] = MACRO_CONTENT_KEYS
    theme: str = "Confluence"
    line_numbers: bool = True


@dataclass(frozen=True)
class MacroAttribute:
    "An attribute on the opening tag of a structured macro, e.g. `ac:name`."

    key: str
    value: str


@dataclass(frozen=True)
class MacroParameter:
    "A parameter element `<ac:parameter>` nested in a structured macro."

    name: str
    value: str


@dataclass(frozen=True)
class MacroContent:
    "A body element such as `<ac:rich-text-body>` nested in a structured macro."

    key: str
    value: str


MacroLine = MacroAttribute | MacroParameter | MacroContent


def classify_line(text: str, content_keys: Iterable[str] = MACRO_CONTENT_KEYS) -> MacroLine | None:
    """
    Classifies a single line of a structured macro declaration.

    A line of the form `key: value` without indentation is an attribute, or a body element if the key is a
    content key. An indented `key: value` is always a parameter. A line without a colon is a parameter with
    an empty name.

    :param text: Line of text in a fenced code block.
    :param content_keys: Keys that produce a body element.
    :returns: The kind of element the line produces, or `None` for a blank line.
    """

    left, colon, right = text.partition(":")
    if not colon:
        value = left.strip()
        if not value:
            return None
        return MacroParameter("", value)

    key = left.strip()
    value = right.strip()
    if not key:
        return MacroParameter("", value)

    if left[0] == key[0]:
        if key in content_keys:
            return MacroContent(key, value)
        else:
            return MacroAttribute(key, value)
    else:
        return MacroParameter(key, value)


@dataclass
class MacroDeclaration:
    """
    A structured macro assembled from the lines of a fenced code block.

    :param attributes: Attributes on the opening tag, without the `ac:` prefix.
    :param elements: Parameters and body elements in declaration order.
    """

    attributes: dict[str, str] = field(default_factory=dict)
    elements: list[MacroParameter | MacroContent] = field(default_factory=list)

    @classmethod
    def parse(cls, lines: Iterable[str], content_keys: Iterable[str] = MACRO_CONTENT_KEYS) -> "MacroDeclaration":
        "Builds a macro declaration line by line."

        keys = frozenset(content_keys)
        macro = cls()
        for line in lines:
            item = classify_line(line, keys)
            if item is not None:
                macro.add(item)
        return macro

    def add(self, item: MacroLine) -> None:
        "Appends an attribute, parameter or body element to the declaration."

        if isinstance(item, MacroAttribute):
            if item.key in self.attributes:
                LOGGER.debug("Macro attribute %s redefined", item.key)
            self.attributes[item.key] = item.value
        else:
            self.elements.append(item)


def write_macro(out: TextIO, macro: MacroDeclaration) -> None:
    """
    Writes a structured macro in Confluence Storage Format.

    Keys and values are written as declared; values may hold Confluence Storage Format markup and entity references.
    """

    start = io.StringIO()
    start.write("<ac:structured-macro")
    for key, value in macro.attributes.items():
        start.write(f' ac:{key}="{value}"')
    start.write(">")

    body = io.StringIO()
    for element in macro.elements:
        if isinstance(element, MacroContent):
            body.write(f"<ac:{element.key}>{element.value}</ac:{element.key}>")
        else:
            body.write(f'<ac:parameter ac:name="{element.name}">{element.value}</ac:parameter>')

    out.write(start.getvalue() + body.getvalue() + "</ac:structured-macro>")


def _escape_cdata(text: str) -> str:
    "Splits the CDATA terminator `]]>` across two adjacent CDATA sections."

    return text.replace("]]>", "]]]]><![CDATA[>")


class FencedCodeRenderer:
    """
    Renders fenced code blocks as Confluence Storage Format.

    A block tagged with the macro language is a structured macro declaration; any other block becomes a `code`
    macro. Rendering has two phases, `open` and `close`, invoked when a document walker enters and leaves the
    fenced code block.
    """

    languages: LanguageTable
    options: FencedCodeOptions

    def __init__(self, languages: LanguageTable | None = None, options: FencedCodeOptions | None = None) -> None:
        """
        Creates a renderer.

        :param languages: Language alias table; defaults to the table shipped with the package.
        :param options: Options that control the generated content.
        """

        self.languages = languages if languages is not None else get_default_languages()
        self.options = options if options is not None else FencedCodeOptions()

    def is_macro(self, block: FencedBlock) -> bool:
        "True if the block declares a structured macro."

        return block.language == self.options.macro_language

    def open(self, block: FencedBlock, out: TextIO) -> None:
        "Writes the leading part of the block, or the complete structured macro for a macro declaration."

        if self.is_macro(block):
            write_macro(out, MacroDeclaration.parse(block.lines, self.options.content_keys))
            return

        out.write('<ac:structured-macro ac:name="code" ac:schema-version="1">')
        out.write(f'<ac:parameter ac:name="theme">{html.escape(self.options.theme)}</ac:parameter>')
        out.write(f'<ac:parameter ac:name="linenumbers">{"true" if self.options.line_numbers else "false"}</ac:parameter>')
        if block.language is not None:
            language = self.languages.lookup(block.language)
            out.write(f'<ac:parameter ac:name="language">{html.escape(language)}</ac:parameter>')

        out.write("<ac:plain-text-body><![CDATA[")
        for index, line in enumerate(block.lines):
            if index > 0:
                out.write("\n")
            out.write(_escape_cdata(line))

    def close(self, block: FencedBlock, out: TextIO) -> None:
        "Writes the trailing part of the block."

        if self.is_macro(block):
            return

        out.write("]]></ac:plain-text-body></ac:structured-macro>")

    def render(self, block: FencedBlock, out: TextIO) -> None:
        "Writes the complete block."

        self.open(block, out)
        self.close(block, out)

    def render_to_string(self, block: FencedBlock) -> str:
        "Returns the Confluence Storage Format representation of the block."

        with io.StringIO() as out:
            self.render(block, out)
            return out.getvalue()
