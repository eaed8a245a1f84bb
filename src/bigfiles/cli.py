"""CLI interface for list-big-files."""

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from bigfiles import __version__
from bigfiles.display import (
    console,
    err_console,
    show_error,
    show_results,
    show_scan_header,
    show_scanning_progress,
)
from bigfiles.models import ScanConfig
from bigfiles.scanner import RootUnavailableError, scan
from bigfiles.threshold import DEFAULT_THRESHOLD, InvalidSizeError, parse_threshold

EXAMPLES = """\
Examples:

  list-big-files /home/user/documents   files >= 100MB (default)

  list-big-files . 50MB                 files >= 50MB in the current directory

  list-big-files /path 1GB              files >= 1GB

  list-big-files ~/Downloads 200M       files >= 200MB
"""

# Create Typer app
app = typer.Typer(
    name="list-big-files",
    help="Find large files in a directory, largest first.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"list-big-files version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command(epilog=EXAMPLES)
def main(
    ctx: typer.Context,
    directory: str = typer.Argument(
        ".",
        help="Directory to scan (default: current directory). Use 'help' to show this message.",
    ),
    size: str = typer.Argument(
        DEFAULT_THRESHOLD,
        help=(
            "Minimum file size; a bare number is MB (e.g. 100, 50MB, 500M, 1GB, 2G). "
            "Put -- before a value that starts with '-'."
        ),
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        envvar="BIGFILES_WORKERS",
        help="Threads used to stat files (default: based on CPU count).",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        help="Follow symbolic links (each directory is visited once).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log skipped entries and scan details to stderr.",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Scan DIRECTORY for files of at least SIZE and list them largest first.

    Sizes use binary units: 1 MB = 1024 x 1024 bytes.
    """
    if directory == "help":
        typer.echo(ctx.get_help())
        raise typer.Exit()

    configure_logging(verbose)

    try:
        threshold = parse_threshold(size)
    except InvalidSizeError as e:
        show_error(str(e))
        raise typer.Exit(1)

    config = ScanConfig(workers=workers, follow_symlinks=follow_symlinks)

    show_scan_header(directory, threshold)

    try:
        with show_scanning_progress() as progress:
            task = progress.add_task("Scanning...", total=None)

            def update_progress(checked: int) -> None:
                progress.update(task, description=f"Checked {checked} files...")

            result = scan(directory, threshold, config, progress_callback=update_progress)
    except RootUnavailableError as e:
        show_error(str(e))
        raise typer.Exit(1)

    show_results(result)


if __name__ == "__main__":
    app()
