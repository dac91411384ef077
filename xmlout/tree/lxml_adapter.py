"""
Build document trees from lxml.
"""

from typing import Optional, Union

import structlog
from lxml import etree

from .nodes import (
    Comment,
    DocType,
    Document,
    Element,
    Entity,
    Namespace,
    ProcessingInstruction,
)
from .types import TreeError


logger = structlog.get_logger(__name__)


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    # Keep entity references, comments and PIs so they survive the round trip
    return etree.XMLParser(
        resolve_entities=False,
        remove_comments=False,
        remove_pis=False,
        strip_cdata=False,
        no_network=True,
        encoding=encoding,
    )


def parse_document(source: Union[str, bytes]) -> Document:
    """
    Parse XML text into a Document.

    Args:
        source: XML content as text or bytes

    Returns:
        Document built from the parsed tree
    """
    encoding = None
    # lxml rejects str input that carries an encoding declaration
    if isinstance(source, str):
        source = source.encode("utf-8")
        encoding = "utf-8"
    try:
        root = etree.fromstring(source, _make_parser(encoding))
    except etree.XMLSyntaxError as e:
        logger.warning("XML parse error", message=e.msg, line=e.lineno, column=e.offset)
        raise TreeError(f"Invalid XML content: {e}") from e
    return from_lxml(root.getroottree())


def from_lxml(source) -> Document:
    """
    Convert an lxml element or element tree into a Document.

    Top-level comments and processing instructions around the root element
    and the DOCTYPE are only available when the whole tree is passed in.
    """
    if isinstance(source, etree._ElementTree):
        tree = source
        lxml_root = source.getroot()
    else:
        tree = source.getroottree()
        lxml_root = source

    if lxml_root is None or not isinstance(lxml_root.tag, str):
        raise TreeError("lxml source has no root element")

    document = Document(_convert_element(lxml_root))

    if lxml_root.getparent() is None:
        for sibling in reversed(list(lxml_root.itersiblings(preceding=True))):
            document.insert_before_root(_convert_leaf(sibling))
        for sibling in lxml_root.itersiblings():
            document.add_content(_convert_leaf(sibling))

        docinfo = tree.docinfo
        if docinfo.doctype:
            document.doctype = DocType(
                element_name=docinfo.root_name,
                public_id=docinfo.public_id,
                system_id=docinfo.system_url,
            )

    logger.debug("Converted lxml tree", root=document.root_element.qualified_name)
    return document


def _convert_element(lxml_element: etree._Element) -> Element:
    qname = etree.QName(lxml_element)
    namespace = Namespace.get(lxml_element.prefix, qname.namespace)
    element = Element(qname.localname, namespace)

    for key, value in lxml_element.attrib.items():
        attribute_name = etree.QName(key)
        if attribute_name.namespace:
            prefix = _prefix_for(lxml_element, attribute_name.namespace)
            element.set_attribute(
                attribute_name.localname,
                value,
                Namespace.get(prefix, attribute_name.namespace),
            )
        else:
            element.set_attribute(attribute_name.localname, value)

    if lxml_element.text:
        element.add_text(lxml_element.text)

    for child in lxml_element:
        if isinstance(child.tag, str):
            element.add_content(_convert_element(child))
        else:
            element.add_content(_convert_leaf(child))
        if child.tail:
            element.add_text(child.tail)

    return element


def _convert_leaf(node):
    if node.tag is etree.Comment:
        return Comment(node.text or "")
    if node.tag is etree.ProcessingInstruction:
        return ProcessingInstruction(node.target, node.text or "")
    if node.tag is etree.Entity:
        return Entity(node.name)
    raise TreeError(f"Unsupported lxml node: {node!r}")


def _prefix_for(lxml_element: etree._Element, uri: str) -> str:
    if uri == Namespace.XML_NAMESPACE.uri:
        return Namespace.XML_NAMESPACE.prefix
    # Attributes can only use prefixed namespaces; the default one never applies
    for prefix, bound_uri in lxml_element.nsmap.items():
        if prefix and bound_uri == uri:
            return prefix
    raise TreeError(
        f"No prefix bound for attribute namespace {uri}",
        node_name=etree.QName(lxml_element).localname,
    )
