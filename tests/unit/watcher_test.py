"""Tests for the watchfiles watcher adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from watchfiles import Change

from jsx_tagger.watcher.watchfiles_adapter import (
    WatchfilesWatcher,
    _is_tracked_change,
)


class TestIsTrackedChange:
    def test_tsx_file(self) -> None:
        assert _is_tracked_change(Change.modified, Path("App.tsx")) is True

    def test_jsx_file(self) -> None:
        assert _is_tracked_change(Change.added, Path("Card.jsx")) is True

    def test_plain_script_ignored(self) -> None:
        assert _is_tracked_change(Change.modified, Path("util.ts")) is False

    def test_deleted_file_ignored(self) -> None:
        assert _is_tracked_change(Change.deleted, Path("App.tsx")) is False

    def test_unsupported_no_extension(self) -> None:
        assert _is_tracked_change(Change.added, Path("Makefile")) is False


class TestWatchfilesWatcher:
    def test_implements_protocol(self) -> None:
        from jsx_tagger.core.ports.watcher import FileWatcherPort

        callback = AsyncMock()
        watcher: FileWatcherPort = WatchfilesWatcher("/tmp", callback)
        assert hasattr(watcher, "start")
        assert hasattr(watcher, "stop")

    @pytest.mark.asyncio
    async def test_start_creates_task(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesWatcher("/tmp", callback)

        with patch("jsx_tagger.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            assert watcher._task is not None
            await watcher.stop()
            assert watcher._task is None

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self) -> None:
        watcher = WatchfilesWatcher("/tmp", AsyncMock())
        await watcher.stop()

    @pytest.mark.asyncio
    async def test_double_start_is_noop(self) -> None:
        watcher = WatchfilesWatcher("/tmp", AsyncMock())

        with patch("jsx_tagger.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            task1 = watcher._task
            await watcher.start()
            assert watcher._task is task1
            await watcher.stop()

    @pytest.mark.asyncio
    async def test_callback_receives_markup_files(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesWatcher("/tmp", callback)

        changes = {
            (Change.modified, "/tmp/App.tsx"),
            (Change.added, "/tmp/notes.txt"),
            (Change.added, "/tmp/Card.jsx"),
            (Change.deleted, "/tmp/Old.tsx"),
        }

        with patch("jsx_tagger.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter(changes)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        callback.assert_called_once()
        paths = callback.call_args[0][0]
        assert paths == {Path("/tmp/App.tsx"), Path("/tmp/Card.jsx")}

    @pytest.mark.asyncio
    async def test_callback_not_called_for_untracked_only(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesWatcher("/tmp", callback)

        changes = {(Change.added, "/tmp/readme.txt"), (Change.deleted, "/tmp/App.tsx")}

        with patch("jsx_tagger.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter(changes)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_callback_error_keeps_watching(self) -> None:
        callback = AsyncMock(side_effect=[RuntimeError("boom"), None])
        watcher = WatchfilesWatcher("/tmp", callback)

        batches = [{(Change.modified, "/tmp/A.tsx")}, {(Change.modified, "/tmp/B.tsx")}]

        with patch("jsx_tagger.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _batches_iter(batches)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        assert callback.call_count == 2
        assert callback.call_args[0][0] == {Path("/tmp/B.tsx")}


async def _empty_async_iter() -> AsyncIterator[Any]:
    """Async iterator that never yields, just blocks until cancelled."""
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return
    yield  # pragma: no cover


async def _single_change_iter(changes: set[tuple[Change, str]]) -> AsyncIterator[set[tuple[Change, str]]]:
    """Async iterator that yields one set of changes then blocks."""
    yield changes
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return


async def _batches_iter(batches: list[set[tuple[Change, str]]]) -> AsyncIterator[set[tuple[Change, str]]]:
    for batch in batches:
        yield batch
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return
