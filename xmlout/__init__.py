"""
xmlout: write in-memory XML document trees as formatted XML text.
"""

from .core import OutputSettings, configure_logging, get_settings
from .output import (
    FormatConfig,
    NamespaceScope,
    OutputError,
    SerializationError,
    SinkWriteError,
    UnsupportedEncodingError,
    ValidationResult,
    WellFormednessChecker,
    XMLSerializer,
    escape_attribute_value,
    escape_text,
    serialize,
    to_bytes,
    to_string,
)
from .tree import (
    CDATA,
    Attribute,
    Comment,
    DocType,
    Document,
    Element,
    Entity,
    Namespace,
    ProcessingInstruction,
    TreeError,
    from_lxml,
    parse_document,
)

__version__ = "1.0.0"

__all__ = [
    # Serialization
    "XMLSerializer",
    "serialize",
    "to_string",
    "to_bytes",
    "escape_text",
    "escape_attribute_value",
    "NamespaceScope",
    "WellFormednessChecker",
    # Configuration
    "FormatConfig",
    "OutputSettings",
    "get_settings",
    "configure_logging",
    "ValidationResult",
    # Tree
    "Document",
    "Element",
    "Attribute",
    "Namespace",
    "DocType",
    "Comment",
    "ProcessingInstruction",
    "CDATA",
    "Entity",
    "from_lxml",
    "parse_document",
    # Exceptions
    "OutputError",
    "SinkWriteError",
    "UnsupportedEncodingError",
    "SerializationError",
    "TreeError",
]
