"""
tjp command line interface.

Commands:
  check      Parse TJP files and report syntax and semantic errors
  keywords   List the documented keywords
  describe   Show the reference page of one keyword
  manual     Write the complete keyword reference
"""

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tjp._version import get_version
from tjp.core.config import CONFIG_FILE_NAME, TjpConfig, load_config
from tjp.core.docs import SyntaxReference, render, render_manual
from tjp.core.errors import ParseError, SemanticError, TjpError
from tjp.core.session import ParseSession, parse_files

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="""tjp - TJP project description parser

Commands:
  • check: parse files and report errors with their position
  • keywords, describe, manual: keyword reference generated from the grammar
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"tjp {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(  # noqa: B008
        Path(CONFIG_FILE_NAME), "--config", "-c", help="Path to tjp.toml"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", "-l", help="Logging level (overrides the config file)"
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """tjp CLI main callback for global options."""
    try:
        tjp_config = load_config(config)
    except (OSError, ValueError) as e:
        typer.echo(f"Cannot read configuration {config}: {e}", err=True)
        raise typer.Exit(code=1)
    level = (log_level or tjp_config.parser.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = tjp_config


def _config(ctx: typer.Context) -> TjpConfig:
    return ctx.obj if isinstance(ctx.obj, TjpConfig) else TjpConfig()


def _reference(config: TjpConfig, document: Path | None) -> SyntaxReference:
    """Keyword reference, including the extensions declared by ``document``."""
    with ParseSession(config) as session:
        if document is not None:
            try:
                session.parse_file(document)
            except (ParseError, SemanticError) as e:
                typer.echo(f"Error: {e}", err=True)
                raise typer.Exit(code=1)
        return session.syntax_reference()


@app.command()
def check(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="TJP files to parse"),  # noqa: B008
) -> None:
    """
    Parse TJP files and report errors.

    Every file is parsed in its own session; an error in one file does not
    stop the others from being checked.
    """
    results = parse_files(files, _config(ctx))

    failed = 0
    for result in results:
        if result.ok:
            project = result.project
            typer.echo(
                f"{result.path}: ok ({len(project.tasks)} tasks, "
                f"{len(project.resources)} resources, {len(project.reports)} reports)"
            )
        else:
            failed += 1
            typer.echo(str(result.error), err=True)

    if failed:
        typer.echo(f"{failed} of {len(results)} files failed", err=True)
        raise typer.Exit(code=1)


@app.command()
def keywords(
    ctx: typer.Context,
    document: Path | None = typer.Option(  # noqa: B008
        None, "--with", "-w", help="Include the extensions declared by this TJP file"
    ),
    details: bool = typer.Option(
        False, "--details", "-d", help="Show a table with flags and contexts"
    ),
) -> None:
    """List all documented keywords."""
    try:
        reference = _reference(_config(ctx), document)
    except TjpError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if not details:
        for keyword in reference.keywords():
            typer.echo(keyword)
        return

    table = Table(title=f"Keywords ({len(reference)})")
    table.add_column("Keyword", style="bold")
    table.add_column("Scenario")
    table.add_column("Inherit")
    table.add_column("Context")
    for entry in reference:
        table.add_row(
            entry.keyword,
            "yes" if entry.scenario_specific else "",
            "yes" if entry.inheritable else "",
            ", ".join(c.keyword for c in entry.contexts) or "global",
        )
    console.print(table)


@app.command()
def describe(
    ctx: typer.Context,
    keyword: str = typer.Argument(..., help="Keyword to describe, e.g. task or booking:sloppy"),
    document: Path | None = typer.Option(  # noqa: B008
        None, "--with", "-w", help="Include the extensions declared by this TJP file"
    ),
) -> None:
    """Show the reference page of a keyword."""
    try:
        reference = _reference(_config(ctx), document)
    except TjpError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if keyword not in reference:
        typer.echo(f"Unknown keyword: {keyword}", err=True)
        raise typer.Exit(code=1)
    typer.echo(render(reference[keyword]), nl=False)


@app.command()
def manual(
    ctx: typer.Context,
    output: Path | None = typer.Option(  # noqa: B008
        None, "--output", "-o", help="Write to this file instead of stdout"
    ),
    document: Path | None = typer.Option(  # noqa: B008
        None, "--with", "-w", help="Include the extensions declared by this TJP file"
    ),
) -> None:
    """Render the reference pages of all keywords."""
    try:
        text = render_manual(_reference(_config(ctx), document))
    except TjpError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if output is None:
        typer.echo(text, nl=False)
    else:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {output}")


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
