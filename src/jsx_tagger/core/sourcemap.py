"""Source map (revision 3) assembly for instrumented output.

Injected text never spans lines, so generated line N always corresponds to
original line N; only columns shift. Each line is anchored at column 0, at
every word or punctuation run, and on both sides of every insertion, so a
debugger resolves any generated column to the nearest original token.
Columns are UTF-16 code units, which is what browsers and JS tooling expect.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from jsx_tagger.models import Patch

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_INDEX = {ch: i for i, ch in enumerate(_BASE64)}
_VLQ_SHIFT = 5
_VLQ_MASK = (1 << _VLQ_SHIFT) - 1
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT

_TOKEN = re.compile(r"\w+|[^\w\s]+")

# (generated column, source index, original line, original column), lines 0-based.
Segment = tuple[int, int, int, int]


class SourceMap(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: int = 3
    file: str | None = None
    sources: list[str]
    sources_content: list[str | None] = Field(default_factory=list, alias="sourcesContent")
    names: list[str] = Field(default_factory=list)
    mappings: str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def original_position(self, line: int, column: int) -> tuple[str, int, int] | None:
        """Map a generated (1-based line, 0-based column) to ``(source, line, column)`` in the original."""
        lines = decode_mappings(self.mappings)
        if not 1 <= line <= len(lines):
            return None
        best: Segment | None = None
        for segment in lines[line - 1]:
            if segment[0] > column:
                break
            best = segment
        if best is None:
            return None
        return self.sources[best[1]], best[2] + 1, best[3]


def encode_vlq(value: int) -> str:
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    encoded = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        encoded.append(_BASE64[digit])
        if not vlq:
            return "".join(encoded)


def decode_vlq(text: str, pos: int = 0) -> tuple[int, int]:
    """Decode one value starting at ``pos``; return ``(value, next_pos)``."""
    result = shift = 0
    while True:
        try:
            digit = _BASE64_INDEX[text[pos]]
        except (IndexError, KeyError):
            raise ValueError(f"Invalid VLQ data at position {pos} in {text!r}") from None
        pos += 1
        result += (digit & _VLQ_MASK) << shift
        shift += _VLQ_SHIFT
        if not digit & _VLQ_CONTINUATION:
            break
    value = result >> 1
    return (-value if result & 1 else value), pos


def encode_mappings(lines: Sequence[Sequence[Segment]]) -> str:
    prev_source = prev_line = prev_column = 0
    encoded_lines = []
    for segments in lines:
        prev_generated = 0
        encoded = []
        for generated, source, line, column in segments:
            encoded.append(
                encode_vlq(generated - prev_generated)
                + encode_vlq(source - prev_source)
                + encode_vlq(line - prev_line)
                + encode_vlq(column - prev_column)
            )
            prev_generated, prev_source, prev_line, prev_column = generated, source, line, column
        encoded_lines.append(",".join(encoded))
    return ";".join(encoded_lines)


def decode_mappings(mappings: str) -> list[list[Segment]]:
    source = line = column = 0
    lines: list[list[Segment]] = []
    for encoded_line in mappings.split(";"):
        generated = 0
        segments: list[Segment] = []
        for raw in encoded_line.split(","):
            if not raw:
                continue
            values = []
            pos = 0
            while pos < len(raw):
                value, pos = decode_vlq(raw, pos)
                values.append(value)
            generated += values[0]
            if len(values) >= 4:
                source += values[1]
                line += values[2]
                column += values[3]
                segments.append((generated, source, line, column))
        lines.append(segments)
    return lines


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def _line_segments(row: int, text: str, patches: Sequence[Patch]) -> list[Segment]:
    inserted: dict[int, list[Patch]] = defaultdict(list)
    for patch in patches:
        inserted[patch.column].append(patch)
    anchors = sorted({0, *(m.start() for m in _TOKEN.finditer(text)), *inserted})

    segments: list[Segment] = []
    shift = 0
    prev_column = prev_units = 0
    for column in anchors:
        units = prev_units + _utf16_len(text[prev_column:column])
        prev_column, prev_units = column, units
        for patch in inserted.get(column, []):
            segments.append((units + shift, 0, row, units))
            shift += _utf16_len(patch.text)
        if column < len(text):
            segments.append((units + shift, 0, row, units))
    return segments


def build_source_map(
    original_text: str,
    patches: Sequence[Patch],
    source_path: str,
    generated_file: str | None = None,
) -> SourceMap:
    by_line: dict[int, list[Patch]] = defaultdict(list)
    for patch in patches:
        by_line[patch.line].append(patch)

    lines = [_line_segments(row, text, by_line.get(row + 1, [])) for row, text in enumerate(original_text.split("\n"))]
    return SourceMap(
        file=generated_file,
        sources=[source_path],
        sources_content=[original_text],
        mappings=encode_mappings(lines),
    )
