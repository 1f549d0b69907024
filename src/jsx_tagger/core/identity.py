from __future__ import annotations

import json
import logging
import os
from pathlib import Path, PurePath
from typing import Any
from urllib.parse import quote

from jsx_tagger.core.classifier import resolve_element_name
from jsx_tagger.errors import SnapshotSerializationError
from jsx_tagger.models import AttributeKind, ContentKind, ElementNode, ElementSnapshot, TransformConfig

logger = logging.getLogger(__name__)

# Added to the parser's 0-based column so identities show 1-based columns.
COLUMN_OFFSET = 1

EXPRESSION_SENTINEL = "[expression]"

# Characters encodeURIComponent leaves untouched besides letters, digits and "-_.~".
_URI_COMPONENT_SAFE = "!*'()"


def relative_path(path: str, base_directory: str | Path) -> str:
    """Return ``path`` relative to ``base_directory`` with forward slashes, or ``path`` itself if that fails."""
    try:
        relative = os.path.relpath(path, base_directory)
    except ValueError:
        return path
    return PurePath(relative).as_posix()


def element_identity(element: ElementNode, rel_path: str) -> str:
    assert element.position is not None
    return f"{rel_path}:{element.position.line}:{element.position.column + COLUMN_OFFSET}"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def encode_json(payload: dict[str, Any]) -> str:
    """Compact JSON, percent-encoded so it fits in a quoted attribute value."""
    return encode_uri_component(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))


def props_snapshot(element: ElementNode) -> dict[str, Any]:
    props: dict[str, Any] = {}
    for attr in element.attributes:
        if attr.name is None:
            continue
        if attr.kind is AttributeKind.STRING:
            props[attr.name] = attr.value
        elif attr.kind is AttributeKind.EXPRESSION:
            props[attr.name] = EXPRESSION_SENTINEL
        elif attr.kind is AttributeKind.BOOLEAN:
            props[attr.name] = True
    return props


def content_snapshot(element: ElementNode) -> ElementSnapshot:
    pieces = [
        child.value.strip()
        for child in element.children
        if child.kind in (ContentKind.TEXT, ContentKind.STRING) and child.value.strip()
    ]
    strings = {attr.name: attr.value for attr in element.attributes if attr.kind is AttributeKind.STRING}
    return ElementSnapshot(
        text=" ".join(pieces) if pieces else None,
        placeholder=strings.get("placeholder"),
        class_name=strings.get("className"),
    )


def class_name_line(element: ElementNode) -> int | None:
    for attr in element.attributes:
        if attr.name == "className":
            return attr.line
    return None


def _encoded(payload: dict[str, Any], identity: str) -> str:
    try:
        return encode_json(payload)
    except (TypeError, ValueError, UnicodeError) as exc:
        raise SnapshotSerializationError(identity, exc) from exc


def build_attributes(
    element: ElementNode, rel_path: str, config: TransformConfig
) -> tuple[str, list[tuple[str, str]]]:
    """Compute the identity of a qualifying element and the attributes to inject, in order."""
    assert element.position is not None
    name = resolve_element_name(element) or "unknown"
    identity = element_identity(element, rel_path)
    prefix = config.attribute_prefix

    attributes = [
        (f"{prefix}-id", identity),
        (f"{prefix}-name", name),
        ("data-component-path", rel_path),
        ("data-component-line", str(element.position.line)),
        ("data-component-file", PurePath(rel_path).name),
        ("data-component-name", name),
    ]

    if config.include_static_snapshot and element.attribute_count > 0:
        try:
            attributes.append((f"{prefix}-props", _encoded(props_snapshot(element), identity)))
        except SnapshotSerializationError as exc:
            logger.warning("%s", exc)

    if config.include_content_preview:
        snapshot = content_snapshot(element)
        if not snapshot.is_empty():
            payload = snapshot.model_dump(by_alias=True, exclude_none=True)
            try:
                attributes.append((f"{prefix}-content", _encoded(payload, identity)))
            except SnapshotSerializationError as exc:
                logger.warning("%s", exc)
        line = class_name_line(element)
        if line is not None:
            attributes.append((f"{prefix}-classname-line", str(line)))

    return identity, attributes
