"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from epl2label.domain import Barcode, LabelDocument, LoadedFont, Rule, TextBlock

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for batch composition.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]epl2label[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: str, font: LoadedFont) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font: Decoded font
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(font_path)
    line1.append(f" ({font.family_name})")
    console.print(line1)
    console.print(f"  {font.glyph_count:,} glyphs {SYM_DOT} {font.units_per_em:,} UPM")


def _describe(element: object) -> tuple[str, str]:
    if isinstance(element, TextBlock):
        raster = element.raster
        return "GW", f"{raster.width}x{raster.height} ({raster.bytes_per_row} bytes/row)"
    if isinstance(element, Barcode):
        return "B", f"{element.digits} rot={element.rotation} h={element.height}"
    if isinstance(element, Rule):
        return "LO", f"{element.orientation.value} {element.thickness}x{element.length}"
    return "?", type(element).__name__


def print_document(document: LabelDocument) -> None:
    """Print the planned elements of a label as a table."""
    console.print(
        f"  {document.canvas_width}x{document.canvas_height} dots {SYM_DOT} "
        f"gap {document.gap} {SYM_DOT} D{document.darkness} {SYM_DOT} S{document.speed}"
    )
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Directive")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Details")

    for index, element in enumerate(document.elements, start=1):
        directive, details = _describe(element)
        table.add_row(str(index), directive, str(element.x), str(element.y), details)

    console.print(table)


def print_warning(message: str) -> None:
    """Print a warning line."""
    console.print(f"\n[bold yellow]{SYM_WARN} Warning:[/bold yellow] {message}")


def print_success(destination: str, size: int) -> None:
    """Print success message.

    Args:
        destination: Printer, device or file that received the job
        size: Job size in bytes
    """
    console.print(f"\n[bold green]{SYM_OK} Sent[/bold green] {size:,} bytes")
    line = Text("  ")
    line.append(destination, style="bold")
    console.print(line)


def print_batch_summary(composed: int, failed: int, total_bytes: int, fallbacks: int) -> None:
    """Print batch results.

    Args:
        composed: Labels composed and delivered
        failed: Labels that failed
        total_bytes: Bytes delivered
        fallbacks: Jobs written to the fallback directory
    """
    error_style = "red" if failed > 0 else "green"
    console.print(f"\n[bold green]{SYM_OK} Batch complete[/bold green]")
    console.print(
        f"  {composed} labels {SYM_DOT} {total_bytes:,} bytes {SYM_DOT} "
        f"{fallbacks} fallbacks {SYM_DOT} [{error_style}]{failed} errors[/{error_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
