"""Collapsed XML tree for the ``xml`` snapshot mode.

The tree is deliberately simple rather than a faithful XML-to-JSON mapping:

- an element with neither attributes nor children becomes its text
- attributes go under ``$`` and text next to attributes or children under ``_``
- a child that occurs once is a scalar; repeated siblings become a list
- namespaced names keep the prefix they were written with (``itunes:author``)

A repeated element that happens to occur once in a feed therefore shows up
as a scalar, and stays that way when the JSON is read back.
"""

import io
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Tuple

ATTR_KEY = "$"
TEXT_KEY = "_"

_XML_NS = "http://www.w3.org/XML/1998/namespace"


def parse_tree(raw: bytes) -> Dict[str, Any]:
    """Parse XML bytes into a collapsed tree rooted at the document element.

    Raises:
        ValueError: If the payload is not well-formed XML.
    """
    prefixes = {_XML_NS: "xml"}
    declared: Dict[ET.Element, List[Tuple[str, str]]] = {}
    pending: List[Tuple[str, str]] = []
    root = None

    try:
        for event, item in ET.iterparse(io.BytesIO(raw), events=("start-ns", "start")):
            if event == "start-ns":
                prefix, uri = item
                prefixes.setdefault(uri, prefix)
                pending.append((prefix, uri))
                continue
            if root is None:
                root = item
            if pending:
                declared[item] = pending
                pending = []
    except ET.ParseError as e:
        raise ValueError(f"invalid XML: {e}")

    if root is None:
        raise ValueError("invalid XML: no root element")

    return {_qualified(root.tag, prefixes): _convert(root, prefixes, declared)}


def _qualified(name: str, prefixes: Dict[str, str]) -> str:
    if not name.startswith("{"):
        return name
    uri, local = name[1:].split("}", 1)
    prefix = prefixes.get(uri, "")
    return f"{prefix}:{local}" if prefix else local


def _convert(elem: ET.Element, prefixes: Dict[str, str], declared) -> Any:
    attrs = {}
    for prefix, uri in declared.get(elem, ()):
        attrs[f"xmlns:{prefix}" if prefix else "xmlns"] = uri
    for name, value in elem.attrib.items():
        attrs[_qualified(name, prefixes)] = value

    children: Dict[str, Any] = {}
    for child in elem:
        key = _qualified(child.tag, prefixes)
        value = _convert(child, prefixes, declared)
        if key not in children:
            children[key] = value
        elif isinstance(children[key], list):
            children[key].append(value)
        else:
            children[key] = [children[key], value]

    text = (elem.text or "") + "".join(child.tail or "" for child in elem)

    if not attrs and not children:
        return text

    node: Dict[str, Any] = {}
    if attrs:
        node[ATTR_KEY] = attrs
    if children:
        text = text.strip()
    if text:
        node[TEXT_KEY] = text
    node.update(children)
    return node
