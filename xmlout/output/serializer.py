"""
Serialization of document trees to formatted XML text.
"""

import codecs
import io
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Union

import structlog

from ..tree import (
    ContentShape,
    DocType,
    Document,
    Element,
    Namespace,
    NodeKind,
    classify_content,
    node_kind,
)
from .escaping import escape_attribute_value, escape_text
from .namespaces import NamespaceScope
from .types import (
    FormatConfig,
    SerializationError,
    SinkWriteError,
    UnsupportedEncodingError,
    declared_encoding,
)


logger = structlog.get_logger(__name__)


class _SinkWriter:
    """Encodes text chunks and writes them to a binary sink."""

    def __init__(self, sink: BinaryIO, encoding: str):
        self.sink = sink
        self.encoding = encoding
        self.bytes_written = 0

    def write(self, text: str) -> None:
        # Names, comments, PIs and CDATA have no escape form; they must encode as is
        try:
            data = text.encode(self.encoding)
        except UnicodeEncodeError as e:
            raise SerializationError(
                f"Cannot encode {text!r} in {self.encoding}; "
                "only text and attribute values can use character references"
            ) from e
        self._emit(data)

    def write_escaped(self, text: str) -> None:
        # Characters the encoding cannot represent become character references
        self._emit(text.encode(self.encoding, "xmlcharrefreplace"))

    def _emit(self, data: bytes) -> None:
        try:
            self.sink.write(data)
        except OSError as e:
            raise SinkWriteError(
                f"Failed to write XML output: {e}", bytes_written=self.bytes_written
            ) from e
        self.bytes_written += len(data)

    def flush(self) -> None:
        flush = getattr(self.sink, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except OSError as e:
            raise SinkWriteError(
                f"Failed to flush XML output: {e}", bytes_written=self.bytes_written
            ) from e


class _OutputState:
    """State for one serialization call; never shared between calls."""

    def __init__(
        self,
        config: FormatConfig,
        write: Callable[[str], None],
        write_escaped: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.write = write
        # Escaped text and attribute values; may fall back to character references
        self.write_escaped = write_escaped or write
        self.scope = NamespaceScope()

        self.elements_written = 0
        self.namespace_declarations = 0

    def indent(self, depth: int) -> None:
        if self.config.indenting and self.config.indent:
            self.write(self.config.indent * depth)

    def maybe_newline(self) -> None:
        if self.config.newlines:
            self.write(self.config.line_separator)


class XMLSerializer:
    """
    Writes documents as XML text according to a FormatConfig.

    The configuration held by the serializer is only a default: each call
    captures its configuration once on entry, so a serializer instance can be
    shared across threads.
    """

    def __init__(self, config: Optional[FormatConfig] = None):
        """
        Initialize XML serializer.

        Args:
            config: Default formatting configuration
        """
        self.config = config or FormatConfig()
        self.logger = logger.bind(component="XMLSerializer")

    @classmethod
    def from_settings(cls, settings=None) -> "XMLSerializer":
        """Create a serializer configured from environment settings."""
        from ..core.config import get_settings

        settings = settings or get_settings()
        return cls(settings.to_format_config())

    def serialize(
        self,
        document: Document,
        sink: BinaryIO,
        encoding: Optional[str] = None,
        config: Optional[FormatConfig] = None,
    ) -> None:
        """
        Write ``document`` to a binary sink and flush it.

        Args:
            document: Document to serialize
            sink: Binary stream to write to; the caller opens and closes it
            encoding: Output encoding, defaults to the configured encoding
            config: Formatting configuration for this call only

        Raises:
            UnsupportedEncodingError: If the encoding is unknown. Nothing is written.
            SinkWriteError: If the sink fails. Partial output stays in the sink.
            SerializationError: If a name, comment, PI or CDATA section has
                characters the encoding cannot represent.
        """
        config = config or self.config
        encoding = encoding or config.encoding
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            raise UnsupportedEncodingError(encoding) from e

        writer = _SinkWriter(sink, encoding)
        state = _OutputState(config, writer.write, writer.write_escaped)
        try:
            self._print_document(state, document, encoding)
            writer.flush()
        except SinkWriteError as e:
            self.logger.error("Error writing XML output",
                              error=str(e),
                              bytes_written=e.bytes_written)
            raise

        self.logger.debug("XML serialization completed",
                          encoding=encoding,
                          bytes_written=writer.bytes_written,
                          elements_written=state.elements_written,
                          namespace_declarations=state.namespace_declarations)

    def to_string(self, document: Document, config: Optional[FormatConfig] = None) -> str:
        """Serialize ``document`` to text, declaring the configured encoding."""
        config = config or self.config
        parts: List[str] = []
        state = _OutputState(config, parts.append)
        self._print_document(state, document, config.encoding)

        xml_content = "".join(parts)
        self.logger.debug("XML serialization completed",
                          content_length=len(xml_content),
                          elements_written=state.elements_written,
                          namespace_declarations=state.namespace_declarations)
        return xml_content

    def to_bytes(
        self,
        document: Document,
        encoding: Optional[str] = None,
        config: Optional[FormatConfig] = None,
    ) -> bytes:
        buffer = io.BytesIO()
        self.serialize(document, buffer, encoding, config)
        return buffer.getvalue()

    def write_file(
        self,
        document: Document,
        output_path: Union[str, Path],
        encoding: Optional[str] = None,
        config: Optional[FormatConfig] = None,
    ) -> Path:
        """
        Serialize ``document`` to a file.

        A failed write leaves a partial file behind; removing it is up to the caller.
        """
        output_path = Path(output_path)
        with open(output_path, "wb") as f:
            self.serialize(document, f, encoding, config)

        self.logger.info("XML document written", path=str(output_path))
        return output_path

    def serialize_element(self, element: Element, config: Optional[FormatConfig] = None) -> str:
        """Serialize a single element subtree without a prolog."""
        parts: List[str] = []
        state = _OutputState(config or self.config, parts.append)
        self._print_element(state, element, 0)
        return "".join(parts)

    def _print_document(self, state: _OutputState, document: Document, encoding: str) -> None:
        self.logger.debug("Starting XML serialization",
                          root=document.root_element.qualified_name,
                          encoding=encoding)

        self._print_declaration(state, encoding)
        self._print_doctype(state, document.doctype)

        for node in document.content:
            kind = node_kind(node)
            if kind == NodeKind.ELEMENT:
                self._print_element(state, node, 0)
            elif kind in (NodeKind.COMMENT, NodeKind.PROCESSING_INSTRUCTION, NodeKind.CDATA):
                self._print_leaf(state, node, 0)
            # Text and entity references have no place at document level

    def _print_declaration(self, state: _OutputState, encoding: str) -> None:
        if state.config.suppress_declaration:
            return

        state.write('<?xml version="1.0"')
        if not state.config.omit_encoding:
            state.write(f' encoding="{declared_encoding(encoding)}"')
        state.write("?>")

        # The declaration always ends its line, whatever the newline setting
        state.write(state.config.line_separator)

    def _print_doctype(self, state: _OutputState, doctype: Optional[DocType]) -> None:
        if doctype is None:
            return

        state.write("<!DOCTYPE ")
        state.write(doctype.element_name)

        has_public = False
        if doctype.public_id:
            state.write(f' PUBLIC "{doctype.public_id}"')
            has_public = True
        if doctype.system_id:
            if not has_public:
                state.write(" SYSTEM")
            state.write(f' "{doctype.system_id}"')

        state.write(">")
        state.maybe_newline()

    def _print_leaf(self, state: _OutputState, node, depth: int) -> None:
        """Comments, processing instructions and CDATA sit on their own line."""
        state.indent(depth)
        state.write(node.serialized_form)
        state.maybe_newline()

    def _print_element(self, state: _OutputState, element: Element, depth: int) -> None:
        qualified_name = element.qualified_name
        content = element.content
        scope = state.scope

        state.indent(depth)
        state.write("<")
        state.write(qualified_name)

        mark = scope.size()
        self._declare_if_needed(state, element.namespace, mark, qualified_name)
        self._print_attributes(state, element, mark)

        shape = classify_content(content)
        if shape == ContentShape.TEXT_ONLY and content[0] == "":
            # An empty text run is written like no content at all
            shape = ContentShape.EMPTY

        if shape == ContentShape.EMPTY:
            state.write(" />")
            state.maybe_newline()
        elif shape == ContentShape.TEXT_ONLY:
            state.write(">")
            state.write_escaped(escape_text(content[0]))
            state.write(f"</{qualified_name}>")
            state.maybe_newline()
        else:
            state.write(">")
            state.maybe_newline()
            for node in content:
                self._print_content_node(state, node, depth + 1)
            state.indent(depth)
            state.write(f"</{qualified_name}>")
            state.maybe_newline()

        state.elements_written += 1

        # Bindings declared here go out of scope for the following siblings
        scope.pop_to(mark)

    def _print_content_node(self, state: _OutputState, node, depth: int) -> None:
        kind = node_kind(node)
        if kind == NodeKind.TEXT:
            state.write_escaped(escape_text(node))
        elif kind == NodeKind.ELEMENT:
            self._print_element(state, node, depth)
        elif kind == NodeKind.ENTITY:
            state.write(node.serialized_form)
        elif kind in (NodeKind.COMMENT, NodeKind.PROCESSING_INSTRUCTION, NodeKind.CDATA):
            self._print_leaf(state, node, depth)
        else:
            raise SerializationError(f"Cannot serialize content node of kind {kind.value}")

    def _print_attributes(self, state: _OutputState, element: Element, mark: int) -> None:
        for attribute in element.attributes:
            self._declare_if_needed(state, attribute.namespace, mark, element.qualified_name)

            state.write(" ")
            state.write(attribute.qualified_name)
            state.write('="')
            state.write_escaped(escape_attribute_value(attribute.value))
            state.write('"')

    def _declare_if_needed(
        self, state: _OutputState, namespace: Namespace, mark: int, element_name: str
    ) -> None:
        """Declare ``namespace`` unless its prefix is already bound to the same URI."""
        if not namespace.is_declarable:
            return

        scope = state.scope
        if scope.lookup(namespace.prefix) == namespace.uri:
            return

        if scope.declared_since(mark, namespace.prefix):
            # Same prefix bound to two URIs on one element: the first binding wins
            self.logger.warning("Conflicting namespace prefix on element",
                                element=element_name,
                                prefix=namespace.prefix,
                                kept_uri=scope.lookup(namespace.prefix),
                                ignored_uri=namespace.uri)
            return

        scope.push(namespace)
        self._print_namespace(state, namespace)
        state.namespace_declarations += 1

    def _print_namespace(self, state: _OutputState, namespace: Namespace) -> None:
        state.write(" xmlns")
        if namespace.prefix:
            state.write(":")
            state.write(namespace.prefix)
        state.write('="')
        state.write_escaped(escape_attribute_value(namespace.uri))
        state.write('"')


_default_serializer = XMLSerializer()


def serialize(
    document: Document,
    sink: BinaryIO,
    encoding: Optional[str] = None,
    config: Optional[FormatConfig] = None,
) -> None:
    """Write ``document`` to ``sink`` with the given or default configuration."""
    _default_serializer.serialize(document, sink, encoding, config)


def to_string(document: Document, config: Optional[FormatConfig] = None) -> str:
    return _default_serializer.to_string(document, config)


def to_bytes(
    document: Document,
    encoding: Optional[str] = None,
    config: Optional[FormatConfig] = None,
) -> bytes:
    return _default_serializer.to_bytes(document, encoding, config)
