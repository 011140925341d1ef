"""Whatsupdoc CLI - whatsupdoc command."""

import click

from whatsupdoc.cli.parse import parse_command


@click.group()
@click.version_option(version="0.1.0", prog_name="whatsupdoc")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Whatsupdoc - JavaScript documentation comments to a JSON tree."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


cli.add_command(parse_command, name="parse")


if __name__ == "__main__":
    cli()
