"""
Top-level CLI: `polyzip <input-encoding> list|convert|convert-in-place <file>`.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from polyzip import __version__
from polyzip.conversion.operations import convert_archive, convert_in_place, list_names
from polyzip.core.config import settings
from polyzip.core.errors import PolyzipError, RestoreError, describe_error
from polyzip.schemas.entries import ConversionResult

logger = logging.getLogger(__name__)
err_console = Console(stderr=True)

TRUE_VALUES = {"true", "yes", "1", "on"}
FALSE_VALUES = {"false", "no", "0", "off"}

main_app = typer.Typer(
    help=(
        "Convert the file names stored in a zip file from a legacy encoding to UTF-8.\n\n"
        "INPUT_ENCODING is any codec name Python knows, for example cp1252, cp437, "
        "shift_jis, gbk or iso-8859-2 (see the 'Standard Encodings' table of the "
        "codecs module documentation)."
    ),
    no_args_is_help=True,
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"polyzip {__version__}")
        raise typer.Exit()


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise typer.BadParameter(f"expected true or false, got '{value}'")


def _fail(exc: BaseException):
    err_console.print(f"[bold red]Error:[/bold red] {escape(describe_error(exc))}", soft_wrap=True)
    if isinstance(exc, RestoreError):
        err_console.print(
            f"[yellow]The original archive is preserved in {escape(str(exc.backup_path))}; "
            f"move it back to {escape(str(exc.path))} by hand.[/yellow]",
            soft_wrap=True,
        )
    sys.exit(1)


def echo_results(results: Iterable[ConversionResult]) -> int:
    """Print one line per entry: converted names on stdout, failures on stderr."""
    failures = 0
    for result in results:
        if result.ok:
            typer.echo(result.render())
        else:
            failures += 1
            typer.echo(result.render(), err=True)
    return failures


@main_app.callback()
def main_callback(
    ctx: typer.Context,
    input_encoding: str = typer.Argument(..., help="Encoding the stored file names are written in"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every step"),
    version: Optional[bool] = typer.Option(None, "--version", callback=_version_callback,
                                           is_eager=True, help="Show the version and exit"),
):
    logging.basicConfig(
        level=settings.resolved_log_level(verbose),
        format="%(levelname)s %(name)s - %(message)s"
    )
    ctx.obj = input_encoding


@main_app.command("list")
def list_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="A path to a zip file"),
):
    """List the converted file names in the zip file."""
    try:
        failures = echo_results(list_names(file, ctx.obj))
    except (PolyzipError, OSError) as e:
        _fail(e)
    logger.debug("Listed %s with %d undecodable names", file, failures)


@main_app.command("convert")
def convert_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="A path to a zip file"),
    output: Path = typer.Option(..., "--output", "-o", help="Where to put the new zip file"),
):
    """Convert the file names in the zip file and write the result to a new file."""
    try:
        convert_archive(file, output, ctx.obj)
    except (PolyzipError, OSError) as e:
        _fail(e)


@main_app.command("convert-in-place")
def convert_in_place_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="A path to a zip file"),
    create_backup: str = typer.Option(
        "true", "--create-backup", "-c", metavar="[true|false]",
        help=f"Keep the original file next to the converted one, with a {settings.backup_suffix} suffix",
    ),
):
    """Convert the file names in the zip file in place."""
    keep_backup = _parse_bool(create_backup)
    try:
        convert_in_place(file, ctx.obj, create_backup=keep_backup)
    except (PolyzipError, OSError) as e:
        _fail(e)


def main():
    main_app()


if __name__ == "__main__":
    main()
