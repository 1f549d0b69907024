from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jsx_tagger.core.sourcemap import SourceMap

DEFAULT_PREFIX = "data-simplify"


class TransformConfig(BaseModel):
    """Read-only options shared by every transform invocation."""

    model_config = ConfigDict(frozen=True)

    attribute_prefix: str = DEFAULT_PREFIX
    include_static_snapshot: bool = True
    include_content_preview: bool = False
    base_directory: Path = Field(default_factory=Path.cwd)
    language: str | None = None

    @field_validator("attribute_prefix")
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        if not value or not (value[0].isalpha() or value[0] in "_$"):
            raise ValueError(f"Invalid attribute prefix: {value!r}")
        if not all(ch.isalnum() or ch in "_$-" for ch in value):
            raise ValueError(f"Invalid attribute prefix: {value!r}")
        return value


class SourceUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    path: str


class Position(BaseModel):
    offset: int
    line: int
    column: int


class NameKind(str, Enum):
    IDENTIFIER = "identifier"
    MEMBER = "member"
    OTHER = "other"
    NONE = "none"


class AttributeKind(str, Enum):
    STRING = "string"
    EXPRESSION = "expression"
    BOOLEAN = "boolean"
    ELEMENT = "element"
    SPREAD = "spread"


class ContentKind(str, Enum):
    TEXT = "text"
    STRING = "string"
    OTHER = "other"


class AttributeNode(BaseModel):
    name: str | None
    kind: AttributeKind
    value: str | None = None
    line: int


class ContentChild(BaseModel):
    kind: ContentKind
    value: str = ""


class ElementNode(BaseModel):
    name_kind: NameKind
    name_parts: list[str] = Field(default_factory=list)
    attributes: list[AttributeNode] = Field(default_factory=list)
    children: list[ContentChild] = Field(default_factory=list)
    position: Position | None
    insert_at: Position | None

    @property
    def attribute_count(self) -> int:
        return len(self.attributes)


class ElementSnapshot(BaseModel):
    text: str | None = None
    placeholder: str | None = None
    class_name: str | None = Field(default=None, serialization_alias="className")

    def is_empty(self) -> bool:
        return self.text is None and self.placeholder is None and self.class_name is None


class Patch(BaseModel):
    """A single text insertion; ``line`` is 1-based, ``column`` counts characters."""

    offset: int
    text: str
    line: int
    column: int


class TransformResult(BaseModel):
    code: str
    map: SourceMap
    elements: list[str] = Field(default_factory=list)
