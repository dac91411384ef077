"""
Document tree model consumed by the XML serializer.

Provides:
- Namespace bindings with interned values and the two reserved sentinels
- Elements with ordered attributes, mixed content and weak parent links
- Opaque comment, processing instruction, CDATA and entity nodes
- Conversion from lxml trees
"""

from .lxml_adapter import from_lxml, parse_document
from .nodes import (
    CDATA,
    Attribute,
    Comment,
    ContentNode,
    DocType,
    Document,
    Element,
    Entity,
    Namespace,
    ProcessingInstruction,
    classify_content,
    node_kind,
)
from .types import ContentShape, NodeKind, TreeError

__all__ = [
    # Tree nodes
    "Document",
    "Element",
    "Attribute",
    "Namespace",
    "DocType",
    "Comment",
    "ProcessingInstruction",
    "CDATA",
    "Entity",
    "ContentNode",
    # Helpers
    "node_kind",
    "classify_content",
    "from_lxml",
    "parse_document",
    # Types
    "NodeKind",
    "ContentShape",
    # Exceptions
    "TreeError",
]
