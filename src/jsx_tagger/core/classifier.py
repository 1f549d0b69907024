import logging
from collections.abc import Iterable, Iterator
from enum import Enum

from jsx_tagger.models import ElementNode, NameKind

logger = logging.getLogger(__name__)

# Grouping constructs that never render as a single node of their own.
TRANSPARENT_NAMES: frozenset[str] = frozenset({"Fragment", "React.Fragment"})


class ExclusionReason(str, Enum):
    ALREADY_TAGGED = "already_tagged"
    FRAGMENT = "fragment"
    NO_POSITION = "no_position"
    UNSUPPORTED_NAME = "unsupported_name"


def resolve_element_name(element: ElementNode) -> str | None:
    """Return ``Name`` or ``Namespace.Member`` for supported name shapes, otherwise ``None``."""
    if element.name_kind is NameKind.IDENTIFIER and len(element.name_parts) == 1:
        return element.name_parts[0]
    if element.name_kind is NameKind.MEMBER and len(element.name_parts) >= 2:
        return ".".join(element.name_parts)
    return None


def is_already_tagged(element: ElementNode, prefix: str) -> bool:
    return any(attr.name is not None and attr.name.startswith(prefix) for attr in element.attributes)


def exclusion_reason(element: ElementNode, prefix: str) -> ExclusionReason | None:
    if element.name_kind is NameKind.NONE:
        return ExclusionReason.FRAGMENT
    if is_already_tagged(element, prefix):
        return ExclusionReason.ALREADY_TAGGED
    if element.position is None or element.insert_at is None:
        return ExclusionReason.NO_POSITION
    name = resolve_element_name(element)
    if name is None:
        return ExclusionReason.UNSUPPORTED_NAME
    if name in TRANSPARENT_NAMES:
        return ExclusionReason.FRAGMENT
    return None


def classify_elements(
    elements: Iterable[ElementNode], prefix: str
) -> Iterator[tuple[ElementNode, ExclusionReason | None]]:
    """Pair every element with the reason it is skipped, or ``None`` when it gets tagged."""
    for element in elements:
        reason = exclusion_reason(element, prefix)
        if reason is not None:
            logger.debug("Skipping element %s: %s", element.name_parts or "<>", reason.value)
        yield element, reason
