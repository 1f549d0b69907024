from collections.abc import Sequence

from jsx_tagger.models import ElementNode, Patch

# Markup string attributes have no backslash escapes; character references are decoded back by the compiler.
_ATTRIBUTE_ESCAPES = {
    "&": "&amp;",
    '"': "&quot;",
    "\\": "&#92;",
    "\n": "&#10;",
    "\r": "&#13;",
}


def escape_attribute_value(value: str) -> str:
    return "".join(_ATTRIBUTE_ESCAPES.get(ch, ch) for ch in value)


def render_attributes(attributes: Sequence[tuple[str, str]]) -> str:
    return " ".join(f'{name}="{escape_attribute_value(value)}"' for name, value in attributes)


def build_patch(element: ElementNode, attributes: Sequence[tuple[str, str]]) -> Patch:
    """Insert ``attributes`` right after the element's tag name, ahead of its own attributes."""
    assert element.insert_at is not None
    return Patch(
        offset=element.insert_at.offset,
        text=" " + render_attributes(attributes),
        line=element.insert_at.line,
        column=element.insert_at.column,
    )


def apply_patches(source: bytes, patches: Sequence[Patch]) -> str:
    """Apply all insertions in one left-to-right pass over the original bytes.

    Offsets refer to the original text, so earlier insertions never shift later ones.
    """
    ordered = sorted(patches, key=lambda p: p.offset)
    result: list[bytes] = []
    last_offset = 0
    for patch in ordered:
        if patch.offset < last_offset or (result and patch.offset == last_offset):
            raise ValueError(f"Overlapping insertions at byte offset {patch.offset}")
        if not 0 <= patch.offset <= len(source):
            raise ValueError(f"Insertion offset {patch.offset} outside source of {len(source)} bytes")
        result.append(source[last_offset : patch.offset])
        result.append(patch.text.encode("utf-8"))
        last_offset = patch.offset
    result.append(source[last_offset:])
    return b"".join(result).decode("utf-8")
