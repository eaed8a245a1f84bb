"""Rich terminal display for list-big-files."""

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from bigfiles.models import ScanResult, ScanThreshold, SizeUnit

console = Console()
err_console = Console(stderr=True)


def format_size(size_bytes: int, unit: SizeUnit) -> str:
    """Format bytes in the given unit with two decimals."""
    return f"{size_bytes / unit.bytes_per_unit:.2f}"


def format_threshold(threshold: ScanThreshold) -> str:
    """Threshold in its own unit, e.g. '100 MB' or '1.5 GB'."""
    number = f"{threshold.size_in_unit:.2f}".rstrip("0").rstrip(".")
    return f"{number} {threshold.unit.value}"


def show_scan_header(root: str, threshold: ScanThreshold) -> None:
    """Announce what is about to be scanned."""
    console.print(
        f"[bold blue]Scanning {escape(root)} for files >= "
        f"{format_threshold(threshold)}...[/bold blue]\n"
    )


def show_scanning_progress() -> Progress:
    """Create a spinner for the scan; the total is not known up front."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def build_results_table(result: ScanResult) -> Table:
    """Table of qualifying files, in the order they are stored."""
    unit = result.threshold.unit
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column(f"Size ({unit.value})", justify="right", style="cyan", no_wrap=True)
    table.add_column("Path", overflow="fold")

    for entry in result.entries:
        table.add_row(format_size(entry.size_bytes, unit), escape(entry.path))

    return table


def show_results(result: ScanResult) -> None:
    """Display timing, the sorted table and the totals."""
    console.print(f"[dim]Scanned in: {result.elapsed_seconds:.2f}s[/dim]\n")

    if result.entries:
        console.print(build_results_table(result))
    else:
        console.print(
            f"[yellow]No files >= {format_threshold(result.threshold)} found.[/yellow]"
        )

    console.print(
        f"\n[bold]Total: {result.count} files[/bold] (scanned {result.scanned_count} files)"
    )

    if result.skipped_count:
        console.print(
            f"[yellow]Skipped {result.skipped_count} unreadable entries[/yellow] "
            "[dim](run with --verbose for details)[/dim]"
        )


def show_error(message: str) -> None:
    """Print an error to stderr."""
    err_console.print(f"[red]Error: {escape(message)}[/red]")
