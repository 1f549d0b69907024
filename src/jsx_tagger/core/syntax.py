from __future__ import annotations

import html
import re
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import cast

from tree_sitter import Node, Query, QueryCursor, Tree
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

from jsx_tagger.errors import ParseError
from jsx_tagger.models import (
    AttributeKind,
    AttributeNode,
    ContentChild,
    ContentKind,
    ElementNode,
    NameKind,
    Position,
)

# Grammars that can contain markup; plain typescript cannot.
_MARKUP_LANGUAGES = frozenset({"javascript", "tsx"})

_JS_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LEGACY_OCTAL = re.compile(r"[0-7]{1,3}")


@dataclass(frozen=True)
class SyntaxTree:
    tree: Tree
    source: bytes
    language: str


@lru_cache(maxsize=None)
def _load_query(language: str, query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{language}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def _point_position(source: bytes, offset: int, point: tuple[int, int]) -> Position:
    row, byte_column = point
    line_start = offset - byte_column
    column = len(source[line_start:offset].decode("utf-8", errors="replace"))
    return Position(offset=offset, line=row + 1, column=column)


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(reversed([c for c in current.children if c.has_error or c.is_missing]))
    return None


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if body in _JS_ESCAPES:
        return _JS_ESCAPES[body]
    if body in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        return ""
    if _LEGACY_OCTAL.fullmatch(body):
        # Three-digit octal escapes stop at \377.
        if len(body) == 3 and body[0] > "3":
            return chr(int(body[:2], 8)) + body[2]
        return chr(int(body, 8))
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("x", "u") and len(body) > 1:
        return chr(int(body[1:], 16))
    return body


def _js_string_value(node: Node, source: bytes) -> str:
    parts = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(_text(child, source)))
        else:
            parts.append(_text(child, source))
    # Escaped surrogate pairs arrive as two halves; lone halves are kept as-is.
    return "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def _jsx_string_value(node: Node, source: bytes) -> str:
    # Markup attribute strings carry no escapes, only character references.
    return html.unescape(_text(node, source)[1:-1])


class TreeSitterSyntaxProvider:
    """Parse JSX/TSX with tree-sitter and expose markup elements as ``ElementNode`` models.

    Implements the ``SyntaxProvider`` protocol.
    """

    def parse(self, source: bytes, language: str, path: str = "<source>") -> SyntaxTree:
        parser = get_parser(cast(SupportedLanguage, language))
        tree = parser.parse(source)
        root = tree.root_node
        if root.has_error:
            error = _first_error(root)
            if error is None:
                raise ParseError(path, "syntax error")
            line, column = error.start_point[0] + 1, error.start_point[1] + 1
            kind = f"missing {error.type}" if error.is_missing else "unexpected input"
            raise ParseError(path, f"syntax error ({kind}) at line {line}, column {column}")
        return SyntaxTree(tree=tree, source=source, language=language)

    def walk(self, tree: SyntaxTree) -> Iterator[ElementNode]:
        """Yield every markup element in document order, outer elements first."""
        if tree.language not in _MARKUP_LANGUAGES:
            return
        query = _load_query(tree.language, "elements")
        captures = QueryCursor(query).captures(tree.tree.root_node)
        nodes = sorted(captures.get("element", []), key=lambda n: (n.start_byte, -n.end_byte))
        for node in nodes:
            yield self._to_element(tree, node)

    def position_of(self, tree: SyntaxTree, node: Node) -> Position | None:
        if node.is_missing or node.end_byte <= node.start_byte:
            return None
        return _point_position(tree.source, node.start_byte, node.start_point)

    def _to_element(self, tree: SyntaxTree, node: Node) -> ElementNode:
        source = tree.source
        opening = node.child_by_field_name("open_tag") if node.type == "jsx_element" else node
        if opening is None:
            return ElementNode(name_kind=NameKind.OTHER, position=None, insert_at=None)

        name_node = opening.child_by_field_name("name")
        name_kind, name_parts = self._name_shape(name_node, source)

        insert_at = None
        if name_node is not None and not name_node.is_missing:
            anchor = name_node
            type_arguments = opening.child_by_field_name("type_arguments")
            if type_arguments is not None and type_arguments.end_byte > anchor.end_byte:
                anchor = type_arguments
            insert_at = _point_position(source, anchor.end_byte, anchor.end_point)

        attributes = [
            self._to_attribute(child, source)
            for child in opening.named_children
            if child.type in ("jsx_attribute", "jsx_expression")
        ]
        children = self._content_children(node, source) if node.type == "jsx_element" else []

        return ElementNode(
            name_kind=name_kind,
            name_parts=name_parts,
            attributes=attributes,
            children=children,
            position=self.position_of(tree, node),
            insert_at=insert_at,
        )

    def _name_shape(self, name_node: Node | None, source: bytes) -> tuple[NameKind, list[str]]:
        if name_node is None:
            return NameKind.NONE, []
        if name_node.type == "identifier":
            return NameKind.IDENTIFIER, [_text(name_node, source)]
        if name_node.type in ("member_expression", "nested_identifier"):
            parts = self._member_parts(name_node, source)
            if parts:
                return NameKind.MEMBER, parts
        return NameKind.OTHER, []

    def _member_parts(self, node: Node, source: bytes) -> list[str]:
        if node.type in ("identifier", "property_identifier", "this"):
            return [_text(node, source)]
        if node.type not in ("member_expression", "nested_identifier"):
            return []
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None:
            return []
        head = self._member_parts(obj, source)
        if not head:
            return []
        return [*head, _text(prop, source)]

    def _to_attribute(self, node: Node, source: bytes) -> AttributeNode:
        line = node.start_point[0] + 1
        if node.type == "jsx_expression":
            return AttributeNode(name=None, kind=AttributeKind.SPREAD, line=line)

        name_node, *rest = node.named_children
        name = None if name_node.type == "jsx_namespace_name" else _text(name_node, source)
        value_node = rest[0] if rest else None
        if value_node is None:
            return AttributeNode(name=name, kind=AttributeKind.BOOLEAN, line=line)
        if value_node.type == "string":
            return AttributeNode(
                name=name, kind=AttributeKind.STRING, value=_jsx_string_value(value_node, source), line=line
            )
        if value_node.type == "jsx_expression":
            return AttributeNode(name=name, kind=AttributeKind.EXPRESSION, line=line)
        return AttributeNode(name=name, kind=AttributeKind.ELEMENT, line=line)

    def _content_children(self, node: Node, source: bytes) -> list[ContentChild]:
        children = []
        for child in node.named_children:
            if child.type in ("jsx_opening_element", "jsx_closing_element"):
                continue
            if child.type in ("jsx_text", "html_character_reference"):
                children.append(ContentChild(kind=ContentKind.TEXT, value=html.unescape(_text(child, source))))
            elif child.type == "jsx_expression" and self._is_string_expression(child):
                value = _js_string_value(child.named_children[0], source)
                children.append(ContentChild(kind=ContentKind.STRING, value=value))
            else:
                children.append(ContentChild(kind=ContentKind.OTHER))
        return children

    @staticmethod
    def _is_string_expression(node: Node) -> bool:
        named = node.named_children
        return len(named) == 1 and named[0].type == "string"
