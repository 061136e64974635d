"""CLI entrypoint for vaultdex."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import ROOT_ENV_VAR, load_config
from .errors import VaultError
from .log import configure_logging
from .service import VaultService


def _service(ctx: click.Context) -> VaultService:
    return ctx.obj["service"]


def _exit(fn, *args, **kwargs) -> None:
    """Run a command implementation, turning vault errors into CLI errors."""
    try:
        exit_code = fn(*args, **kwargs)
    except VaultError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


@click.group()
@click.version_option(__version__, prog_name="vaultdex")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    envvar=ROOT_ENV_VAR,
    required=True,
    help=f"Path to the vault root (or set {ROOT_ENV_VAR})",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (defaults to <vault>/vaultdex.yml when present)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for stderr logging (default WARNING, or VAULTDEX_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, vault: Path, config_path: Path | None, log_level: str | None) -> None:
    """vaultdex - live tag/title index over a Markdown note vault.

    Browse, search, read and write notes, or serve them to an agent over MCP.
    """
    configure_logging(log_level)

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    try:
        config = load_config(vault.resolve(), config_path)
    except VaultError as e:
        raise click.ClickException(str(e)) from e

    ctx.ensure_object(dict)
    ctx.obj["service"] = VaultService(config)


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server on stdio.

    Configure your MCP client to launch:

        vaultdex --vault ~/notes serve
    """
    from .mcp.server import serve as serve_stdio

    sys.exit(serve_stdio(_service(ctx), sys.stdin.buffer, sys.stdout.buffer))


@cli.command()
@click.option("--markdown", is_flag=True, help="Print the Markdown returned by the MCP tool")
@click.pass_context
def tree(ctx: click.Context, markdown: bool) -> None:
    """Show the file tree, every tag and note totals."""
    from .commands.index_cmd import run_tree

    _exit(run_tree, _service(ctx), markdown=markdown)


@cli.command()
@click.option("--tag", "-t", "tags", multiple=True, help="Require this tag (repeatable; all must match)")
@click.option("--name", "-n", "exact_name", default=None, help="Exact file name (extension optional)")
@click.option("--keyword", "-k", default=None, help="Substring of name, aliases, tags or path")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def query(
    ctx: click.Context,
    tags: tuple[str, ...],
    exact_name: str | None,
    keyword: str | None,
    output_json: bool,
) -> None:
    """Search notes. Filters combine; at least one is required.

    Examples:

        vaultdex query --tag docker --tag linux

        vaultdex query --name docker-guide

        vaultdex query --tag rust --keyword mcp
    """
    from .commands.query_cmd import run_query

    _exit(
        run_query,
        _service(ctx),
        tags=list(tags),
        exact_name=exact_name,
        keyword=keyword,
        output_json=output_json,
    )


@cli.command()
@click.argument("path")
@click.pass_context
def read(ctx: click.Context, path: str) -> None:
    """Print a note's raw text (PATH is relative to the vault root)."""
    from .commands.note_cmd import run_read

    _exit(run_read, _service(ctx), path)


@cli.command()
@click.argument("category")
@click.argument("filename")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag for a new note (repeatable)")
@click.option("--alias", "-a", "aliases", multiple=True, help="Alias for a new note (repeatable)")
@click.option("--status", default=None, help="Note status (default: the configured default status)")
@click.option("--content", default=None, help="Markdown body")
@click.option(
    "--content-file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read the Markdown body from a file ('-' for stdin)",
)
@click.pass_context
def write(
    ctx: click.Context,
    category: str,
    filename: str,
    tags: tuple[str, ...],
    aliases: tuple[str, ...],
    status: str | None,
    content: str | None,
    content_file,
) -> None:
    """Create a note, or append to it if it exists.

    Examples:

        vaultdex write tech docker-guide -t docker -a "Docker guide" --content "..."

        vaultdex write journal 2025-01-01 --content-file entry.md
    """
    from .commands.note_cmd import run_write

    if (content is None) == (content_file is None):
        raise click.UsageError("Pass exactly one of --content or --content-file")
    body = content if content is not None else content_file.read()

    _exit(
        run_write,
        _service(ctx),
        category,
        filename,
        tags=list(tags),
        aliases=list(aliases),
        status=status or _service(ctx).config.default_status,
        content=body,
    )


@cli.command()
@click.pass_context
def tips(ctx: click.Context) -> None:
    """Print the vault writing guide."""
    from .commands.note_cmd import run_tips

    _exit(run_tips, _service(ctx))


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Rebuild the index whenever notes change (Ctrl+C to stop)."""
    from .commands.watch_cmd import run_watch

    _exit(run_watch, _service(ctx))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
