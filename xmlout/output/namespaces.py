"""
Namespace bindings in scope during tree descent.
"""

from typing import Iterator, List, Optional

from ..tree import Namespace


class NamespaceScope:
    """
    Stack of namespace bindings declared by the elements currently open.

    Only the innermost binding of a prefix is visible. Callers record
    ``size()`` before declaring on an element and ``pop_to`` that mark when
    the element is closed.
    """

    def __init__(self):
        self._bindings: List[Namespace] = []

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[Namespace]:
        return reversed(self._bindings)

    def size(self) -> int:
        return len(self._bindings)

    def push(self, namespace: Namespace) -> None:
        self._bindings.append(namespace)

    def pop_to(self, mark: int) -> None:
        """Drop every binding pushed since ``mark``."""
        if mark < 0 or mark > len(self._bindings):
            raise ValueError(f"Invalid scope mark {mark} for stack of size {len(self._bindings)}")
        del self._bindings[mark:]

    def lookup(self, prefix: str) -> Optional[str]:
        """URI of the nearest binding for ``prefix``, or None when unbound."""
        for namespace in reversed(self._bindings):
            if namespace.prefix == prefix:
                return namespace.uri
        return None

    def declared_since(self, mark: int, prefix: str) -> bool:
        """Whether ``prefix`` was pushed after ``mark``, i.e. on the current element."""
        return any(namespace.prefix == prefix for namespace in self._bindings[mark:])
