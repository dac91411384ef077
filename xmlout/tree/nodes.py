"""
Node implementations for the document tree.

The serializer only reads these objects. Ownership flows from a parent to its
content; the upward ``parent`` link is a weak reference used for read-only
ancestor queries.
"""

import weakref
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Tuple, Union

from .types import ContentShape, NodeKind, TreeError


XML_NAMESPACE_URI = "http://www.w3.org/XML/1998/namespace"


@dataclass(frozen=True)
class Namespace:
    """A (prefix, uri) binding. Two namespaces are equal when both parts match."""

    prefix: str
    uri: str

    NO_NAMESPACE: ClassVar["Namespace"]
    XML_NAMESPACE: ClassVar["Namespace"]

    _interned: ClassVar[Dict[Tuple[str, str], "Namespace"]] = {}

    def __post_init__(self):
        if self.prefix and not self.uri:
            raise TreeError(f"Namespace prefix '{self.prefix}' must be bound to a URI")
        if self.prefix == "xml" and self.uri != XML_NAMESPACE_URI:
            raise TreeError(f"Prefix 'xml' can only be bound to {XML_NAMESPACE_URI}")
        if self.prefix == "xmlns":
            raise TreeError("Prefix 'xmlns' is reserved and cannot be declared")

    @classmethod
    def get(cls, prefix: Optional[str] = "", uri: Optional[str] = "") -> "Namespace":
        """Return the interned namespace for ``prefix`` and ``uri``."""
        prefix = prefix or ""
        uri = uri or ""

        if prefix == "xml":
            return cls.XML_NAMESPACE
        if not uri and not prefix:
            return cls.NO_NAMESPACE

        key = (prefix, uri)
        namespace = cls._interned.get(key)
        if namespace is None:
            namespace = cls(prefix, uri)
            cls._interned[key] = namespace
        return namespace

    @property
    def is_declarable(self) -> bool:
        """False for the two sentinels, which never get an xmlns declaration."""
        return self != Namespace.NO_NAMESPACE and self != Namespace.XML_NAMESPACE


Namespace.NO_NAMESPACE = Namespace("", "")
Namespace.XML_NAMESPACE = Namespace("xml", XML_NAMESPACE_URI)


def _qualify(name: str, namespace: Namespace) -> str:
    if namespace.prefix:
        return f"{namespace.prefix}:{name}"
    return name


@dataclass(frozen=True)
class Attribute:
    """A named attribute value, optionally in a namespace."""

    name: str
    value: str
    namespace: Namespace = Namespace.NO_NAMESPACE

    @property
    def qualified_name(self) -> str:
        return _qualify(self.name, self.namespace)


@dataclass(frozen=True)
class DocType:
    """DOCTYPE declaration for a document."""

    element_name: str
    public_id: Optional[str] = None
    system_id: Optional[str] = None


@dataclass(frozen=True)
class Comment:
    """An XML comment."""

    text: str

    kind: ClassVar[NodeKind] = NodeKind.COMMENT

    @property
    def serialized_form(self) -> str:
        return f"<!--{self.text}-->"


@dataclass(frozen=True)
class ProcessingInstruction:
    """A processing instruction such as ``<?xml-stylesheet href="a.xsl"?>``."""

    target: str
    data: str = ""

    kind: ClassVar[NodeKind] = NodeKind.PROCESSING_INSTRUCTION

    @property
    def serialized_form(self) -> str:
        if self.data:
            return f"<?{self.target} {self.data}?>"
        return f"<?{self.target}?>"


@dataclass(frozen=True)
class CDATA:
    """A CDATA section. Its text is written as-is."""

    text: str

    kind: ClassVar[NodeKind] = NodeKind.CDATA

    @property
    def serialized_form(self) -> str:
        return f"<![CDATA[{self.text}]]>"


@dataclass(frozen=True)
class Entity:
    """An unexpanded entity reference."""

    name: str

    kind: ClassVar[NodeKind] = NodeKind.ENTITY

    @property
    def serialized_form(self) -> str:
        return f"&{self.name};"


class Element:
    """An element with a qualified name, ordered attributes and mixed content."""

    kind: ClassVar[NodeKind] = NodeKind.ELEMENT

    def __init__(self, name: str, namespace: Optional[Namespace] = None):
        if not name:
            raise TreeError("Element name cannot be empty")
        self.name = name
        self.namespace = namespace or Namespace.NO_NAMESPACE
        self._attributes: List[Attribute] = []
        self._content: List["ContentNode"] = []
        self._parent: Optional["weakref.ReferenceType[Element]"] = None

    def __repr__(self) -> str:
        return f"<Element {self.qualified_name!r} at {id(self):#x}>"

    @property
    def qualified_name(self) -> str:
        return _qualify(self.name, self.namespace)

    @property
    def parent(self) -> Optional["Element"]:
        """The enclosing element, or None for a root or detached element."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        return tuple(self._attributes)

    @property
    def content(self) -> Tuple["ContentNode", ...]:
        return tuple(self._content)

    def set_attribute(
        self, name: str, value: str, namespace: Optional[Namespace] = None
    ) -> "Element":
        """Set an attribute, replacing one with the same name and namespace URI."""
        if not name:
            raise TreeError("Attribute name cannot be empty", node_name=self.qualified_name)
        if not isinstance(value, str):
            raise TreeError(
                f"Attribute '{name}' value must be a string, got {type(value).__name__}",
                node_name=self.qualified_name,
            )

        attribute = Attribute(name, value, namespace or Namespace.NO_NAMESPACE)
        # Unprefixed attributes are in no namespace; a default binding would move the element
        if not attribute.namespace.prefix and attribute.namespace.uri:
            raise TreeError(
                f"Attribute '{name}' needs a prefixed namespace, "
                f"not the default {attribute.namespace.uri}",
                node_name=self.qualified_name,
            )
        for index, existing in enumerate(self._attributes):
            if existing.name == name and existing.namespace.uri == attribute.namespace.uri:
                self._attributes[index] = attribute
                return self
        self._attributes.append(attribute)
        return self

    def get_attribute_value(
        self, name: str, namespace: Optional[Namespace] = None
    ) -> Optional[str]:
        uri = (namespace or Namespace.NO_NAMESPACE).uri
        for attribute in self._attributes:
            if attribute.name == name and attribute.namespace.uri == uri:
                return attribute.value
        return None

    def add_content(self, node: "ContentNode") -> "Element":
        """Append a text run or node to this element's content."""
        kind = node_kind(node)
        if kind == NodeKind.ELEMENT:
            self._adopt(node)
        self._content.append(node)
        return self

    def add_text(self, text: str) -> "Element":
        return self.add_content(text)

    def get_text(self) -> str:
        """Concatenated text runs directly inside this element."""
        return "".join(node for node in self._content if isinstance(node, str))

    def get_children(self, name: Optional[str] = None) -> List["Element"]:
        return [
            node
            for node in self._content
            if isinstance(node, Element) and (name is None or node.name == name)
        ]

    def ancestors(self):
        """Yield enclosing elements, nearest first."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def _adopt(self, child: "Element") -> None:
        if child.parent is not None:
            raise TreeError(
                "Element already has a parent; detach it first",
                node_name=child.qualified_name,
            )
        if child is self or any(ancestor is child for ancestor in self.ancestors()):
            raise TreeError(
                "Element cannot contain itself or one of its ancestors",
                node_name=child.qualified_name,
            )
        child._parent = weakref.ref(self)


ContentNode = Union[str, Element, Comment, ProcessingInstruction, CDATA, Entity]
TopLevelNode = Union[Element, Comment, ProcessingInstruction, CDATA]


def node_kind(node: object) -> NodeKind:
    """Return the kind tag for a content node."""
    if isinstance(node, str):
        return NodeKind.TEXT
    kind = getattr(type(node), "kind", None)
    if isinstance(kind, NodeKind):
        return kind
    raise TreeError(f"Unsupported content node type: {type(node).__name__}")


def classify_content(content) -> ContentShape:
    """Classify element content as empty, a single text run, or mixed."""
    if len(content) == 0:
        return ContentShape.EMPTY
    if len(content) == 1 and isinstance(content[0], str):
        return ContentShape.TEXT_ONLY
    return ContentShape.MIXED


class Document:
    """A root element plus top-level comments, processing instructions and DOCTYPE."""

    _TOP_LEVEL_KINDS = (
        NodeKind.ELEMENT,
        NodeKind.COMMENT,
        NodeKind.PROCESSING_INSTRUCTION,
        NodeKind.CDATA,
    )

    def __init__(self, root: Element, doctype: Optional[DocType] = None):
        self.doctype = doctype
        self._content: List[TopLevelNode] = []
        self.add_content(root)

    @property
    def content(self) -> Tuple[TopLevelNode, ...]:
        return tuple(self._content)

    @property
    def root_element(self) -> Element:
        for node in self._content:
            if isinstance(node, Element):
                return node
        raise TreeError("Document has no root element")

    def add_content(self, node: TopLevelNode) -> "Document":
        kind = node_kind(node)
        if kind not in self._TOP_LEVEL_KINDS:
            raise TreeError(f"{kind.value} is not allowed at document level")
        if kind == NodeKind.ELEMENT:
            if any(isinstance(existing, Element) for existing in self._content):
                raise TreeError(
                    "Document already has a root element", node_name=node.qualified_name
                )
            if node.parent is not None:
                raise TreeError(
                    "Root element cannot have a parent", node_name=node.qualified_name
                )
        self._content.append(node)
        return self

    def insert_before_root(self, node: TopLevelNode) -> "Document":
        """Insert a comment, PI or CDATA node ahead of the root element."""
        kind = node_kind(node)
        if kind == NodeKind.ELEMENT or kind not in self._TOP_LEVEL_KINDS:
            raise TreeError(f"{kind.value} cannot be inserted before the root element")
        index = self._content.index(self.root_element)
        self._content.insert(index, node)
        return self
