"""whatsupdoc parse command - print the documentation tree as JSON."""

import json
from pathlib import Path

import click
from rich.console import Console

from whatsupdoc.config.loader import load_config
from whatsupdoc.core.errors import WhatsupdocError
from whatsupdoc.core.logging import configure_logging
from whatsupdoc.extraction.document import Document
from whatsupdoc.ops import parse_file, parse_files


@click.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation")
@click.option("--allow-errors", is_flag=True, help="Document sources with syntax errors")
@click.option(
    "--require-annotation",
    is_flag=True,
    help="Skip files without a /*whatsupdoc*/ comment (several paths only)",
)
@click.option(
    "--config-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .whatsupdoc.yaml (default: current directory)",
)
@click.pass_context
def parse_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    indent: int,
    allow_errors: bool,
    require_annotation: bool,
    config_root: Path | None,
) -> None:
    """Extract documentation from JavaScript files.

    With one PATH the module tree is printed; with several, a tree of
    modules keyed by module id.
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    overrides: dict[str, bool] = {}
    if allow_errors:
        overrides["allow_syntax_errors"] = True
    if require_annotation:
        overrides["require_annotation"] = True

    try:
        config = load_config(config_root, **({"parser": overrides} if overrides else {}))
    except WhatsupdocError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)

    try:
        if len(paths) == 1:
            root = parse_file(paths[0], config=config)
        else:
            root = parse_files(list(paths), config=config)
    except WhatsupdocError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        _report(root)
    click.echo(json.dumps(root.to_dict(), indent=indent))


def _report(root: Document) -> None:
    console = Console(stderr=True)
    modules = root.children.values() if root.type == "modules" else [root]
    for module in modules:
        console.print(f"[green]{module.id or '<module>'}[/green]", soft_wrap=True)
