"""Unit tests for the build-tool plugin wrapper and its statistics."""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from jsx_tagger.models import TransformConfig
from jsx_tagger.plugin import JsxTagger, TaggerOptions, TransformStats

PROJECT_SOURCE = """import React from "react";
const a = <Button />;
"""


def _tagger(**kwargs: object) -> JsxTagger:
    return JsxTagger(TaggerOptions(config=TransformConfig(base_directory="/repo"), **kwargs))  # type: ignore[arg-type]


class TestEnablement:
    def test_undecided_until_config_resolved(self) -> None:
        tagger = _tagger()
        assert tagger.transform(PROJECT_SOURCE, "/repo/src/App.tsx") is None
        assert tagger.stats.files_seen == 0

    @pytest.mark.parametrize(
        ("command", "mode", "expected"),
        [("serve", "production", True), ("build", "development", True), ("build", "production", False)],
    )
    def test_mode_gating(self, command: str, mode: str, expected: bool) -> None:
        tagger = _tagger()
        tagger.config_resolved(command, mode)
        assert tagger.enabled is expected

    def test_explicit_setting_wins(self) -> None:
        tagger = _tagger(enabled=False)
        tagger.config_resolved("serve", "development")
        assert tagger.enabled is False
        assert tagger.transform(PROJECT_SOURCE, "/repo/src/App.tsx") is None


class TestTransform:
    def test_tags_included_file(self) -> None:
        tagger = _tagger(enabled=True)
        result = tagger.transform(PROJECT_SOURCE, "/repo/src/App.tsx")
        assert result is not None
        assert result.elements == ["src/App.tsx:2:11"]
        assert tagger.stats.snapshot()["elements_tagged"] == 1

    def test_default_include_filter(self) -> None:
        tagger = _tagger(enabled=True)
        assert tagger.includes("/repo/src/App.jsx?v=123")
        assert not tagger.includes("/repo/src/util.ts")
        assert tagger.transform(PROJECT_SOURCE, "/repo/src/App.js") is None
        assert tagger.stats.files_seen == 0

    def test_custom_include_filter(self) -> None:
        tagger = _tagger(enabled=True, include=lambda file_id: file_id.endswith(".js"))
        result = tagger.transform(PROJECT_SOURCE, "/repo/src/App.js")
        assert result is not None

    def test_unchanged_file_counted(self) -> None:
        tagger = _tagger(enabled=True)
        assert tagger.transform("export const x = 1;\n", "/repo/src/x.tsx") is None
        assert tagger.stats.files_unchanged == 1

    def test_parse_failure_is_counted_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        tagger = _tagger(enabled=True)
        with caplog.at_level(logging.WARNING):
            assert tagger.transform("const = ;", "/repo/src/Broken.tsx") is None
        assert "/repo/src/Broken.tsx" in caplog.text
        assert tagger.stats.files_failed == 1


def test_stats_are_thread_safe() -> None:
    stats = TransformStats()

    def _record(i: int) -> None:
        if i % 2:
            stats.record_transformed(3)
        else:
            stats.record_unchanged()

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(_record, range(1000)))

    assert stats.snapshot() == {
        "files_seen": 1000,
        "files_transformed": 500,
        "files_unchanged": 500,
        "files_failed": 0,
        "elements_tagged": 1500,
    }
