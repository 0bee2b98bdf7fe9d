"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2025, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import lxml.etree as ET

ElementType = ET._Element  # pyright: ignore [reportPrivateUsage]

# XML namespaces typically associated with Confluence Storage Format documents
_namespaces = {
    "ac": "http://atlassian.com/content",
    "ri": "http://atlassian.com/resource/identifier",
}
for key, value in _namespaces.items():
    ET.register_namespace(key, value)


class ParseError(RuntimeError):
    pass


def _qname(namespace_uri: str, name: str) -> str:
    return ET.QName(namespace_uri, name).text


def AC_ATTR(name: str) -> str:
    return _qname(_namespaces["ac"], name)


def elements_from_strings(items: list[str]) -> ElementType:
    """
    Creates a Confluence Storage Format XML document tree from XML fragment strings.

    This function
    * adds an XML declaration,
    * wraps the content in a root element,
    * adds namespace declarations associated with Confluence documents.

    :param items: Strings to parse into XML fragments.
    :returns: An XML document as an element tree.
    :raises ParseError: Raised when the fragments do not make up well-formed XML.
    """

    parser = ET.XMLParser(
        remove_blank_text=True,
        remove_comments=True,
        strip_cdata=False,
    )

    ns_attr_list = "".join(f' xmlns:{key}="{value}"' for key, value in _namespaces.items())

    data = [
        '<?xml version="1.0"?>',
        f"<root{ns_attr_list}>",
    ]
    data.extend(items)
    data.append("</root>")

    try:
        return ET.fromstringlist(data, parser=parser)
    except ET.XMLSyntaxError as ex:
        raise ParseError() from ex


def elements_from_string(content: str) -> ElementType:
    """
    Creates a Confluence Storage Format XML document tree from an XML string.

    :param content: String to parse into XML.
    :returns: An XML document as an element tree.
    """

    return elements_from_strings([content])

