from __future__ import annotations

import logging
from pathlib import Path

from jsx_tagger.core.classifier import classify_elements
from jsx_tagger.core.identity import build_attributes, relative_path
from jsx_tagger.core.injector import apply_patches, build_patch
from jsx_tagger.core.languages import resolve_language
from jsx_tagger.core.ports.syntax import SyntaxProvider
from jsx_tagger.core.sourcemap import build_source_map
from jsx_tagger.core.syntax import TreeSitterSyntaxProvider
from jsx_tagger.errors import ParseError
from jsx_tagger.models import Patch, SourceUnit, TransformConfig, TransformResult

logger = logging.getLogger(__name__)


def instrument(
    unit: SourceUnit,
    config: TransformConfig,
    provider: SyntaxProvider | None = None,
) -> TransformResult | None:
    """Tag every qualifying element of one source file.

    Returns ``None`` when no element was tagged. Raises ``ParseError`` when the
    text does not parse.
    """
    provider = provider or TreeSitterSyntaxProvider()
    language = resolve_language(config.language, Path(unit.path))
    try:
        source = unit.text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ParseError(unit.path, f"text is not encodable as UTF-8: {exc.reason}") from exc

    tree = provider.parse(source, language, unit.path)
    rel_path = relative_path(unit.path, config.base_directory)

    patches: list[Patch] = []
    identities: list[str] = []
    for element, reason in classify_elements(provider.walk(tree), config.attribute_prefix):
        if reason is not None:
            continue
        identity, attributes = build_attributes(element, rel_path, config)
        patches.append(build_patch(element, attributes))
        identities.append(identity)

    if not patches:
        return None

    code = apply_patches(source, patches)
    source_map = build_source_map(unit.text, patches, rel_path, generated_file=Path(rel_path).name)
    logger.debug("Tagged %d element(s) in %s", len(patches), rel_path)
    return TransformResult(code=code, map=source_map, elements=identities)


def transform(
    source_text: str,
    file_path: str,
    config: TransformConfig | None = None,
) -> TransformResult | None:
    """Instrument one file, treating a parse failure as "unchanged"."""
    try:
        return instrument(SourceUnit(text=source_text, path=file_path), config or TransformConfig())
    except ParseError as exc:
        logger.warning("JSX tagger failed to parse %s: %s", file_path, exc.detail)
        return None
