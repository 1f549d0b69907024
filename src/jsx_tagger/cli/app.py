import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from jsx_tagger.cli.build import build, watch
from jsx_tagger.cli.transform import transform

app = typer.Typer(
    name="jsx-tagger",
    help="JSX Tagger CLI: annotate JSX/TSX elements with their source location.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


app.command("transform")(transform)
app.command("build")(build)
app.command("watch")(watch)


def main() -> None:
    app()
