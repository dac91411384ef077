import pytest

from xmlout import (
    Comment,
    DocType,
    Document,
    Element,
    FormatConfig,
    Namespace,
    ProcessingInstruction,
    XMLSerializer,
)


URN_A = Namespace.get("", "urn:a")


@pytest.fixture
def pretty_serializer() -> XMLSerializer:
    """Serializer with two-space indentation and LF line breaks."""
    return XMLSerializer(FormatConfig.pretty(indent_size=2))


@pytest.fixture
def compact_serializer() -> XMLSerializer:
    """Serializer that adds no whitespace and writes no declaration."""
    return XMLSerializer(FormatConfig.compact().with_changes(suppress_declaration=True))


@pytest.fixture
def namespaced_document() -> Document:
    """<root xmlns="urn:a"><child attr="x&amp;y"/></root>"""
    root = Element("root", URN_A)
    child = Element("child", URN_A)
    child.set_attribute("attr", "x&y")
    root.add_content(child)
    return Document(root)


@pytest.fixture
def catalog_document() -> Document:
    """Document with a DOCTYPE, top-level comment and PI and mixed content."""
    root = Element("catalog")
    root.set_attribute("version", "2")

    book = Element("book")
    book.set_attribute("id", "b1")
    title = Element("title")
    title.add_text("Fish & Chips")
    book.add_content(title)
    book.add_content(Comment(" reprint "))
    root.add_content(book)

    document = Document(root, DocType("catalog", system_id="catalog.dtd"))
    document.insert_before_root(Comment(" generated "))
    document.add_content(ProcessingInstruction("checksum", "abc"))
    return document
