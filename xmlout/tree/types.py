"""
Type definitions for the document tree module.
"""

from enum import Enum
from typing import Optional


class TreeError(Exception):
    """Base exception for document tree errors."""

    def __init__(self, message: str, node_name: Optional[str] = None):
        self.node_name = node_name
        super().__init__(message)


class NodeKind(Enum):
    """Kinds of node that may appear in mixed content."""

    TEXT = "text"
    ELEMENT = "element"
    COMMENT = "comment"
    PROCESSING_INSTRUCTION = "processing_instruction"
    CDATA = "cdata"
    ENTITY = "entity"


class ContentShape(Enum):
    """Shape of an element's content, used to pick its output layout."""

    EMPTY = "empty"  # No content nodes
    TEXT_ONLY = "text_only"  # Exactly one text run
    MIXED = "mixed"  # Anything else
