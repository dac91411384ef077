"""
Formatted XML output for document trees.

This module writes document trees as XML text with:
- Configurable indentation, line breaks and line separator
- Optional XML declaration with or without the encoding
- Lazy namespace declarations, emitted only where a prefix binding changes
- Context-aware escaping of element text and attribute values
- Well-formedness checks of the output with lxml
"""

from .escaping import escape_attribute_value, escape_text
from .namespaces import NamespaceScope
from .serializer import XMLSerializer, serialize, to_bytes, to_string
from .types import (
    FormatConfig,
    OutputError,
    SerializationError,
    SinkWriteError,
    UnsupportedEncodingError,
    ValidationResult,
)
from .validator import WellFormednessChecker

__all__ = [
    # Core classes
    "XMLSerializer",
    "NamespaceScope",
    "WellFormednessChecker",
    # Functions
    "serialize",
    "to_string",
    "to_bytes",
    "escape_text",
    "escape_attribute_value",
    # Configuration
    "FormatConfig",
    "ValidationResult",
    # Exceptions
    "OutputError",
    "SinkWriteError",
    "UnsupportedEncodingError",
    "SerializationError",
]
