"""CLI application entry point for epl2label.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import structlog
import typer

from epl2label import __version__
from epl2label.cli.output import (
    console,
    create_progress,
    print_batch_summary,
    print_document,
    print_error,
    print_font_info,
    print_header,
    print_step,
    print_success,
    print_warning,
)
from epl2label.config import (
    ComposerSettings,
    LoggingConfig,
    Orientation,
    Polarity,
    PrinterProfile,
    RenderConfig,
)
from epl2label.core import LabelComposer
from epl2label.domain import LabelRequest, LoadedFont, Product
from epl2label.exceptions import LabelError, SendError, SendErrorKind
from epl2label.io import DeviceSink, FileSink, default_sink, emit_document, load_font, write_job
from epl2label.io.batch import load_batch
from epl2label.io.preview import save_preview
from epl2label.utils import JobStats, configure_logging

# Failures that mean "no printer there", as opposed to a printer that refused the job
FALLBACK_KINDS = (SendErrorKind.NOT_FOUND, SendErrorKind.IO_FAILURE)

PRODUCT_FIELD_SEPARATOR = "|"

logger = structlog.get_logger("epl2label.cli")

# Create the Typer app
app = typer.Typer(
    name="epl2label",
    help="Compose EPL2 print jobs for RTL product labels on thermal printers.",
    add_completion=False,
    no_args_is_help=True,
)


# Options shared by the compose and batch commands
FontOption = Annotated[
    Path,
    typer.Option("--font", "-f", help="TTF/OTF font with the glyphs of every label", show_default=False),
]
PrinterOption = Annotated[
    str,
    typer.Option("--printer", "-p", help="Printer name (default: system default printer)"),
]
DeviceOption = Annotated[
    Path | None,
    typer.Option("--device", help="Raw printer device such as /dev/usb/lp0"),
]
FallbackOption = Annotated[
    Path | None,
    typer.Option("--fallback-dir", help="Write jobs here when the printer is unreachable"),
]
DarknessOption = Annotated[
    int | None,
    typer.Option("--darkness", help="Print head darkness (0-15)", min=0, max=15),
]
SpeedOption = Annotated[
    int | None,
    typer.Option("--speed", help="Print speed (1-6)", min=1, max=6),
]
BoldOption = Annotated[
    int | None,
    typer.Option("--bold-passes", help="Offset draw passes per text line (1 = regular)", min=1, max=4),
]
ThresholdOption = Annotated[
    float | None,
    typer.Option("--threshold", help="Coverage above which a pixel prints black", min=0.01, max=0.99),
]
PolarityOption = Annotated[
    Polarity | None,
    typer.Option("--polarity", help="GW raster polarity expected by the printer"),
]
OrientationOption = Annotated[
    Orientation | None,
    typer.Option("--orientation", help="Lay the label out in portrait or landscape"),
]
ChecksumOption = Annotated[
    bool,
    typer.Option("--firmware-checksum", help="Send 12 barcode digits and let firmware add the check digit"),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option("--log-file", help="Write detailed logs to file"),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
]
QuietOption = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Minimal console output"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]epl2label[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Compose EPL2 print jobs for RTL product labels on thermal printers."""


def parse_product(value: str) -> Product:
    """Parse a ``name|price|barcode`` option value.

    Raises:
        typer.BadParameter: If the value does not have exactly three fields
    """
    parts = value.split(PRODUCT_FIELD_SEPARATOR)
    if len(parts) != 3:
        raise typer.BadParameter(
            f"expected 'name|price|barcode', got {value!r}",
            param_hint="--product",
        )
    name, price, barcode = (part.strip() for part in parts)
    return Product(name=name, price=price, barcode=barcode)


def build_settings(
    darkness: int | None = None,
    speed: int | None = None,
    bold_passes: int | None = None,
    threshold: float | None = None,
    polarity: Polarity | None = None,
    orientation: Orientation | None = None,
    firmware_checksum: bool = False,
    log_file: Path | None = None,
    log_level: str = "WARNING",
) -> ComposerSettings:
    """Create settings from CLI arguments, keeping defaults for unset options."""
    printer_overrides = {
        "darkness": darkness,
        "speed": speed,
        "polarity": polarity,
        "orientation": orientation,
    }
    render_overrides = {"bold_passes": bold_passes, "coverage_threshold": threshold}

    printer = {key: value for key, value in printer_overrides.items() if value is not None}
    if firmware_checksum:
        printer["firmware_checksum"] = True

    return ComposerSettings(
        render=RenderConfig(**{key: value for key, value in render_overrides.items() if value is not None}),
        printer=PrinterProfile(**printer),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )


def file_target(target: str, suffix: str | None) -> str:
    """Name used for a job written by a FileSink, unique per ``suffix``."""
    if suffix is None:
        return target
    return f"{target or 'label'}_{suffix}"


def deliver(
    data: bytes,
    printer: str,
    device: Path | None = None,
    output: Path | None = None,
    fallback_dir: Path | None = None,
    stats: JobStats | None = None,
    file_suffix: str | None = None,
) -> str:
    """Send one job and return a description of where it went.

    An explicit ``output`` file wins, then ``device``, then the platform's
    default sink. If a printer or device cannot be reached and
    ``fallback_dir`` is set, the job is written there instead. Jobs that end
    up in a file get ``file_suffix`` appended to their name.

    Raises:
        SendError: If delivery (and the fallback, when allowed) fails
    """
    if output is not None:
        write_job(output, data, str(output))
        return str(output)

    if device is not None:
        sink = DeviceSink()
        target = str(device)
    else:
        sink = default_sink(fallback_dir)
        target = printer

    if isinstance(sink, FileSink):
        target = file_target(target, file_suffix)
        sink.send(target, data)
        return str(sink.path_for(target))

    try:
        sink.send(target, data)
    except SendError as e:
        if fallback_dir is None or e.kind not in FALLBACK_KINDS:
            raise
        logger.warning("Printer unreachable, using fallback directory", target=target, kind=e.kind.value)
        fallback = FileSink(fallback_dir)
        fallback_target = file_target(target, file_suffix)
        fallback.send(fallback_target, data)
        if stats is not None:
            stats.fallbacks += 1
        print_warning(f"{e.reason}; job written to {fallback.path_for(fallback_target)}")
        return str(fallback.path_for(fallback_target))

    return target or "default printer"


def _load_font(font_path: Path, quiet: bool) -> LoadedFont:
    if not quiet:
        print_step("Loading font")
    font = load_font(font_path)
    if not quiet:
        print_font_info(str(font_path), font)
    return font


@app.command()
def compose(
    font_path: FontOption,
    product: Annotated[
        list[str],
        typer.Option(
            "--product",
            help="Product as 'name|price|barcode' (give 2 or 4)",
            show_default=False,
        ),
    ],
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Brand caption printed in every grid quadrant"),
    ] = None,
    printer: PrinterOption = "",
    device: DeviceOption = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the job to this file instead of a printer"),
    ] = None,
    fallback_dir: FallbackOption = None,
    darkness: DarknessOption = None,
    speed: SpeedOption = None,
    bold_passes: BoldOption = None,
    threshold: ThresholdOption = None,
    polarity: PolarityOption = None,
    orientation: OrientationOption = None,
    firmware_checksum: ChecksumOption = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the planned label without sending it"),
    ] = False,
    preview: Annotated[
        Path | None,
        typer.Option("--preview", help="Save an approximate PNG preview of the label"),
    ] = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Compose one label and send it to a printer.

    Example:
        epl2label compose -f Amiri-Regular.ttf
            --product "عصير برتقال|5.00|622300123456"
            --product "مياه معدنية|3.50|622300654321"
    """
    configure_logging(log_file=log_file, console_level=log_level, quiet=quiet)

    if not quiet:
        print_header(__version__)

    try:
        products = tuple(parse_product(value) for value in product)
    except typer.BadParameter as e:
        print_error(f"Invalid product: {e.message}")
        raise typer.Exit(code=1)

    try:
        font = _load_font(font_path, quiet)
        settings = build_settings(
            darkness=darkness,
            speed=speed,
            bold_passes=bold_passes,
            threshold=threshold,
            polarity=polarity,
            orientation=orientation,
            firmware_checksum=firmware_checksum,
            log_file=log_file,
            log_level=log_level,
        )

        if not quiet:
            print_step(f"Composing label with {len(products)} products")
        composer = LabelComposer(settings)
        document = composer.plan(LabelRequest(products=products, font=font, title=title))

        if preview is not None:
            save_preview(document, preview, settings.printer.polarity)
            if not quiet:
                console.print(f"  Preview saved to {preview}")

        if dry_run:
            print_document(document)
            raise typer.Exit(code=0)

        data = emit_document(document)
        destination = deliver(data, printer, device=device, output=output, fallback_dir=fallback_dir)

        if not quiet:
            print_success(destination, len(data))

    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except SendError as e:
        print_error(f"Could not send job: {e.reason}", details=f"{e.target} ({e.kind.value})")
        raise typer.Exit(code=1)
    except LabelError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def batch(
    batch_file: Annotated[
        Path,
        typer.Argument(help="JSON file with one entry per label", show_default=False),
    ],
    font_path: FontOption,
    printer: PrinterOption = "",
    device: DeviceOption = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Write every job to this directory instead of a printer"),
    ] = None,
    fallback_dir: FallbackOption = None,
    darkness: DarknessOption = None,
    speed: SpeedOption = None,
    bold_passes: BoldOption = None,
    threshold: ThresholdOption = None,
    polarity: PolarityOption = None,
    orientation: OrientationOption = None,
    firmware_checksum: ChecksumOption = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Compose and send every label of a batch file with one shared font.

    A failing label is reported and skipped; the command exits with code 1
    if any label failed.
    """
    log = configure_logging(log_file=log_file, console_level=log_level, quiet=quiet)

    if not quiet:
        print_header(__version__)

    try:
        entries = load_batch(batch_file)
        font = _load_font(font_path, quiet)
        settings = build_settings(
            darkness=darkness,
            speed=speed,
            bold_passes=bold_passes,
            threshold=threshold,
            polarity=polarity,
            orientation=orientation,
            firmware_checksum=firmware_checksum,
            log_file=log_file,
            log_level=log_level,
        )
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except LabelError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    composer = LabelComposer(settings, logger=log)
    file_sink = FileSink(output_dir) if output_dir is not None else None
    stats = JobStats()

    def run_entry(index: int) -> None:
        data = composer.render(entries[index].to_request(font))
        if file_sink is not None:
            file_sink.send(f"label_{index:03d}", data)
        else:
            deliver(
                data,
                printer,
                device=device,
                fallback_dir=fallback_dir,
                stats=stats,
                file_suffix=f"{index:03d}",
            )
        stats.record_label(len(data))

    if not quiet:
        print_step(f"Composing {len(entries)} labels")

    with create_progress() as progress:
        task_id = progress.add_task("Labels", total=len(entries), visible=not quiet)
        for index in range(len(entries)):
            try:
                run_entry(index)
            except LabelError as e:
                stats.record_error(f"label {index}", e)
                log.error("Label failed", index=index, error=str(e))
                if not quiet:
                    print_warning(f"label {index}: {e}")
            progress.update(task_id, advance=1)

    if not quiet:
        print_batch_summary(
            composed=stats.labels_composed,
            failed=len(stats.errors),
            total_bytes=stats.bytes_emitted,
            fallbacks=stats.fallbacks,
        )

    if stats.errors:
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
