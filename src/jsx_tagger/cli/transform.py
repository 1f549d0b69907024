from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from jsx_tagger.core.build import write_source_map
from jsx_tagger.core.transform import transform as _transform
from jsx_tagger.models import DEFAULT_PREFIX, TransformConfig

err_console = Console(stderr=True)

PrefixOption = Annotated[str, typer.Option(help="Prefix for injected data attributes.")]
PropsOption = Annotated[bool, typer.Option("--props/--no-props", help="Inject the static props snapshot.")]
PreviewOption = Annotated[bool, typer.Option(help="Inject a text/className content preview.")]
BaseDirOption = Annotated[
    Path | None, typer.Option(help="Directory identities are relative to (default: current directory).")
]


def build_config(prefix: str, props: bool, content_preview: bool, base_dir: Path | None) -> TransformConfig:
    try:
        return TransformConfig(
            attribute_prefix=prefix,
            include_static_snapshot=props,
            include_content_preview=content_preview,
            base_directory=base_dir or Path.cwd(),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def transform(
    path: Annotated[Path, typer.Argument(help="JSX/TSX file to tag.", exists=True, dir_okay=False)],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the result here instead of stdout.")
    ] = None,
    source_map: Annotated[bool, typer.Option("--map", help="Write a source map next to --output.")] = False,
    prefix: PrefixOption = DEFAULT_PREFIX,
    props: PropsOption = True,
    content_preview: PreviewOption = False,
    base_dir: BaseDirOption = None,
) -> None:
    """Tag a single file and print or write the result."""
    if source_map and output is None:
        raise typer.BadParameter("--map requires --output.", param_hint="--map")

    config = build_config(prefix, props, content_preview, base_dir)
    text = path.read_text(encoding="utf-8")
    result = _transform(text, str(path), config)

    if result is None:
        err_console.print(f"[yellow]Unchanged[/yellow] {path}")
        code = text
    else:
        err_console.print(f"[green]Tagged[/green] {len(result.elements)} element(s) in {path}")
        code = result.code

    if output is None:
        typer.echo(code, nl=False)
        return

    if result is not None and source_map:
        code = write_source_map(result, path, output)
    output.write_text(code, encoding="utf-8")
