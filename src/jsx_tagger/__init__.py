from jsx_tagger.core.classifier import ExclusionReason, classify_elements, resolve_element_name
from jsx_tagger.core.sourcemap import SourceMap
from jsx_tagger.core.syntax import TreeSitterSyntaxProvider
from jsx_tagger.core.transform import instrument, transform
from jsx_tagger.errors import JsxTaggerError, ParseError, SnapshotSerializationError
from jsx_tagger.models import SourceUnit, TransformConfig, TransformResult
from jsx_tagger.plugin import JsxTagger, TaggerOptions, TransformStats

__all__ = [
    "ExclusionReason",
    "JsxTagger",
    "JsxTaggerError",
    "ParseError",
    "SnapshotSerializationError",
    "SourceMap",
    "SourceUnit",
    "TaggerOptions",
    "TransformConfig",
    "TransformResult",
    "TransformStats",
    "TreeSitterSyntaxProvider",
    "classify_elements",
    "instrument",
    "resolve_element_name",
    "transform",
]
