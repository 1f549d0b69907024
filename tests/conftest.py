"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from jsx_tagger.core.syntax import TreeSitterSyntaxProvider
from jsx_tagger.models import TransformConfig

_REPO_ROOT = Path(__file__).parent.parent

# Fixed project root used for path-dependent expectations.
PROJECT_ROOT = Path("/repo")


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tsx_parser() -> Parser:
    """Return a tree-sitter parser for TSX."""
    return get_parser("tsx")


@pytest.fixture
def provider() -> TreeSitterSyntaxProvider:
    return TreeSitterSyntaxProvider()


@pytest.fixture
def config() -> TransformConfig:
    return TransformConfig(base_directory=PROJECT_ROOT)


@pytest.fixture
def app_path() -> str:
    return str(PROJECT_ROOT / "src" / "App.tsx")
