from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from jsx_tagger.core.languages import is_markup_file
from jsx_tagger.core.transform import instrument
from jsx_tagger.errors import ParseError
from jsx_tagger.models import SourceUnit, TransformConfig, TransformResult

logger = logging.getLogger(__name__)


@dataclass
class TaggerOptions:
    # None means "decide from the build command/mode".
    enabled: bool | None = None
    include: Callable[[str], bool] | None = None
    config: TransformConfig = field(default_factory=TransformConfig)


class TransformStats:
    """Aggregate counters, safe to update from several worker threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.files_seen = 0
        self.files_transformed = 0
        self.files_unchanged = 0
        self.files_failed = 0
        self.elements_tagged = 0

    def record_transformed(self, elements: int) -> None:
        with self._lock:
            self.files_seen += 1
            self.files_transformed += 1
            self.elements_tagged += elements

    def record_unchanged(self) -> None:
        with self._lock:
            self.files_seen += 1
            self.files_unchanged += 1

    def record_failed(self) -> None:
        with self._lock:
            self.files_seen += 1
            self.files_failed += 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {
                "files_seen": self.files_seen,
                "files_transformed": self.files_transformed,
                "files_unchanged": self.files_unchanged,
                "files_failed": self.files_failed,
                "elements_tagged": self.elements_tagged,
            }


class JsxTagger:
    """Build-tool facing wrapper deciding when the transform runs."""

    name = "jsx-tagger"
    enforce = "pre"

    def __init__(self, options: TaggerOptions | None = None) -> None:
        self.options = options or TaggerOptions()
        self.enabled = self.options.enabled
        self.stats = TransformStats()
        self._include = self.options.include or is_markup_file

    def config_resolved(self, command: str, mode: str) -> None:
        if self.enabled is None:
            self.enabled = command == "serve" or mode == "development"
            state = "enabled" if self.enabled else "disabled"
            logger.debug("jsx-tagger %s for command=%s mode=%s", state, command, mode)

    def includes(self, file_id: str) -> bool:
        return self._include(file_id)

    def transform(self, code: str, file_id: str) -> TransformResult | None:
        if not self.enabled or not self.includes(file_id):
            return None
        try:
            result = instrument(SourceUnit(text=code, path=file_id), self.options.config)
        except ParseError as exc:
            logger.warning("JSX tagger failed to parse %s: %s", file_id, exc.detail)
            self.stats.record_failed()
            return None
        if result is None:
            self.stats.record_unchanged()
        else:
            self.stats.record_transformed(len(result.elements))
        return result
