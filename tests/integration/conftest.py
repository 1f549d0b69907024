"""Fixtures for integration tests that run the tagger over a real source tree."""

from pathlib import Path

import pytest

SOURCES = {
    "App.tsx": (
        'import { Card } from "./nested/Card";\n'
        "export default function App() {\n"
        "  return (\n"
        "    <main>\n"
        '      <Card title="Hello" />\n'
        "    </main>\n"
        "  );\n"
        "}\n"
    ),
    "nested/Card.jsx": (
        "export function Card({ title }) {\n"
        "  return <section className=\"card\">{title}</section>;\n"
        "}\n"
    ),
    "util.ts": "export const add = (a: number, b: number) => a + b;\n",
    "broken.tsx": "export const Broken = () => <div>;\n",
}


@pytest.fixture
def sources() -> dict[str, str]:
    return dict(SOURCES)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small project under ``tmp_path/src`` mixing tagged, plain and broken files."""
    root = tmp_path / "src"
    for rel, text in SOURCES.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root
