"""
Generic, namespace-agnostic XML -> dict conversion for feed documents.

Shape of the produced tree:
- element names and attribute names lose their namespace (``{uri}link`` -> ``link``);
- attributes become plain keys on the element mapping;
- an element with neither attributes nor children becomes its trimmed text;
- otherwise text is kept under ``"#text"`` next to attributes/children;
- repeated child elements are collected into a list in document order.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, Union

TEXT_KEY = "#text"

XmlNode = Union[str, Dict[str, Any]]


def _local_name(name: str) -> str:
    if name.startswith("{"):
        name = name.split("}", 1)[1]
    if ":" in name:
        name = name.split(":", 1)[1]
    return name


def _element_text(elem: ET.Element) -> str:
    parts = [elem.text or ""]
    for child in elem:
        parts.append(child.tail or "")
    return "".join(parts).strip()


def _add_child(node: Dict[str, Any], key: str, value: XmlNode) -> None:
    if key not in node:
        node[key] = value
        return
    existing = node[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        node[key] = [existing, value]


def element_to_node(elem: ET.Element) -> XmlNode:
    text = _element_text(elem)
    if not elem.attrib and len(elem) == 0:
        return text

    node: Dict[str, Any] = {}
    for name, value in elem.attrib.items():
        node[_local_name(name)] = value.strip()
    for child in elem:
        if not isinstance(child.tag, str):
            # comments / processing instructions
            continue
        _add_child(node, _local_name(child.tag), element_to_node(child))
    if text:
        node[TEXT_KEY] = text
    return node


def parse_xml_tree(document: Union[str, bytes]) -> Dict[str, XmlNode]:
    """
    Parse an XML document into ``{root_name: node}``.

    Raises xml.etree.ElementTree.ParseError when the document is not
    well-formed.
    """
    root = ET.fromstring(document)
    return {_local_name(root.tag): element_to_node(root)}
