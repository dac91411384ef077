"""
Type definitions for XML output module.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


class OutputError(Exception):
    """Base exception for XML output errors."""
    pass


class SinkWriteError(OutputError, OSError):
    """Writing to the output sink failed. Output written so far is not rolled back."""

    def __init__(self, message: str, bytes_written: int = 0):
        self.bytes_written = bytes_written
        super().__init__(message)


class UnsupportedEncodingError(OutputError, LookupError):
    """The requested output encoding is unknown."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Unsupported output encoding: {encoding}")


class SerializationError(OutputError):
    """A node could not be serialized."""
    pass


UTF8_ALIASES = frozenset({"utf8", "utf-8", "utf_8", "u8"})


def declared_encoding(name: str) -> str:
    """Name to write in the XML declaration for ``name``."""
    if name.lower() in UTF8_ALIASES:
        return "UTF-8"
    return name


@dataclass(frozen=True)
class FormatConfig:
    """
    Formatting choices for one serialization.

    The defaults add no whitespace at all: no indent string, no new lines.
    Values are not validated; a sensible indent is the caller's business.
    """

    # Indentation settings
    indent: str = ""
    indenting: bool = True

    # Line breaks
    newlines: bool = False
    line_separator: str = "\r\n"

    # Declaration settings
    encoding: str = "UTF-8"
    suppress_declaration: bool = False
    omit_encoding: bool = False

    @classmethod
    def compact(cls, encoding: str = "UTF-8") -> "FormatConfig":
        """Create configuration with no added whitespace."""
        return cls(indent="", newlines=False, encoding=encoding)

    @classmethod
    def pretty(cls, indent_size: int = 2, line_separator: str = "\n") -> "FormatConfig":
        """Create configuration for human-readable output."""
        return cls(newlines=True, line_separator=line_separator).with_indent_size(indent_size)

    def with_indent_size(self, indent_size: int) -> "FormatConfig":
        """Copy with an indent of ``indent_size`` spaces."""
        if indent_size < 0:
            raise ValueError(f"Indent size must be non-negative, got {indent_size}")
        return replace(self, indent=" " * indent_size)

    def with_changes(self, **changes: Any) -> "FormatConfig":
        return replace(self, **changes)

    @property
    def declared_encoding(self) -> str:
        return declared_encoding(self.encoding)


@dataclass
class ValidationResult:
    """Result of checking serialized XML."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    validation_time: float = 0.0

    # Detailed error information
    error_details: List[Dict[str, Any]] = field(default_factory=list)

    def add_error(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """Add a validation error."""
        self.errors.append(message)
        self.error_details.append({
            'type': 'error',
            'message': message,
            'line': line,
            'column': column
        })
        self.is_valid = False

    def add_warning(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """Add a validation warning."""
        self.warnings.append(message)
        self.error_details.append({
            'type': 'warning',
            'message': message,
            'line': line,
            'column': column
        })

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def summary(self) -> str:
        """Get validation summary."""
        if self.is_valid:
            warning_text = f" ({len(self.warnings)} warnings)" if self.warnings else ""
            return f"Well-formedness check passed{warning_text}"
        else:
            return f"Well-formedness check failed: {len(self.errors)} errors, {len(self.warnings)} warnings"
