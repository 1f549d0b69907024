from collections.abc import Iterator
from typing import Any, Protocol

from jsx_tagger.models import ElementNode, Position


class SyntaxProvider(Protocol):
    def parse(self, source: bytes, language: str, path: str = "<source>") -> Any: ...

    def walk(self, tree: Any) -> Iterator[ElementNode]: ...

    def position_of(self, tree: Any, node: Any) -> Position | None: ...
