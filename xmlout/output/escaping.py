"""
Escaping of reserved characters in element text and attribute values.

Both functions make a single left-to-right pass. Characters outside the
reserved set, non-ASCII included, are copied unchanged; turning text into
bytes is left to the serializer's encoder.
"""

TEXT_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
}

ATTRIBUTE_ENTITIES = dict(TEXT_ENTITIES)
ATTRIBUTE_ENTITIES.update({
    '"': "&quot;",
    "'": "&apos;",
})

_TEXT_TABLE = str.maketrans(TEXT_ENTITIES)
_ATTRIBUTE_TABLE = str.maketrans(ATTRIBUTE_ENTITIES)


def escape_text(text: str) -> str:
    """Escape ``<``, ``>`` and ``&`` for use as element content."""
    return text.translate(_TEXT_TABLE)


def escape_attribute_value(value: str) -> str:
    """Escape ``<``, ``>``, ``&``, ``"`` and ``'`` for use inside a quoted attribute."""
    return value.translate(_ATTRIBUTE_TABLE)
