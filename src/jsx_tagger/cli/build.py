import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from jsx_tagger.cli.transform import BaseDirOption, PrefixOption, PreviewOption, PropsOption, build_config
from jsx_tagger.core.build import build_tree, tag_files
from jsx_tagger.models import DEFAULT_PREFIX
from jsx_tagger.plugin import JsxTagger, TaggerOptions, TransformStats
from jsx_tagger.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console()

SrcArgument = Annotated[Path, typer.Argument(help="Source directory.", exists=True, file_okay=False)]
OutArgument = Annotated[Path, typer.Argument(help="Output directory for tagged copies.", file_okay=False)]
WorkersOption = Annotated[int, typer.Option(min=1, help="Number of files tagged concurrently.")]
MapOption = Annotated[bool, typer.Option("--map", help="Write a .map file next to every tagged file.")]


def _render_stats(stats: TransformStats) -> None:
    table = Table(show_lines=False)
    table.add_column("metric")
    table.add_column("count", justify="right")
    for key, value in stats.snapshot().items():
        table.add_row(key.replace("_", " "), str(value))
    console.print(table)


def _make_tagger(prefix: str, props: bool, content_preview: bool, base_dir: Path | None) -> JsxTagger:
    config = build_config(prefix, props, content_preview, base_dir)
    return JsxTagger(TaggerOptions(enabled=True, config=config))


def build(
    src: SrcArgument,
    out: OutArgument,
    workers: WorkersOption = 1,
    source_map: MapOption = False,
    prefix: PrefixOption = DEFAULT_PREFIX,
    props: PropsOption = True,
    content_preview: PreviewOption = False,
    base_dir: BaseDirOption = None,
) -> None:
    """Write tagged copies of every .jsx/.tsx file under SRC into OUT."""
    tagger = _make_tagger(prefix, props, content_preview, base_dir)
    written = build_tree(tagger, src, out, workers=workers, write_map=source_map)
    console.print(f"[green]Wrote[/green] {len(written)} file(s) to {out}")
    _render_stats(tagger.stats)


def watch(
    src: SrcArgument,
    out: OutArgument,
    source_map: MapOption = False,
    prefix: PrefixOption = DEFAULT_PREFIX,
    props: PropsOption = True,
    content_preview: PreviewOption = False,
    base_dir: BaseDirOption = None,
) -> None:
    """Build once, then re-tag files under SRC whenever they change."""
    tagger = _make_tagger(prefix, props, content_preview, base_dir)
    written = build_tree(tagger, src, out, write_map=source_map)
    console.print(f"[green]Wrote[/green] {len(written)} file(s) to {out}")

    src_root = src.resolve()
    out_root = out.resolve()

    async def _on_change(paths: set[Path]) -> None:
        changed = sorted(p.resolve() for p in paths if p.exists() and out_root not in p.resolve().parents)
        await asyncio.to_thread(tag_files, tagger, changed, src_root, out_root, 1, source_map)
        for path in changed:
            console.print(f"[green]Re-tagged[/green] {path}")

    async def _run() -> None:
        watcher = WatchfilesWatcher(src_root, _on_change)
        await watcher.start()
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    console.print(f"[green]Watching[/green] {src} (Ctrl+C to stop)")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("[yellow]Stopped[/yellow]")
    _render_stats(tagger.stats)
