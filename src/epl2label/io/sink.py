"""Printer sinks: deliver a finished EPL2 job to a device or a file.

Every sink exposes ``send(target, data)`` and reports failures as SendError
with a structured kind. Sinks never retry and never fall back; that policy
belongs to the caller.
"""

import errno
import sys
from pathlib import Path
from typing import Protocol

import structlog

from epl2label.exceptions import SendError, SendErrorKind

try:
    import win32print
except ImportError:  # pragma: no cover
    win32print = None  # type: ignore[assignment]

logger = structlog.get_logger("epl2label.sink")

# Windows error codes returned by the spooler API
ERROR_ACCESS_DENIED = 5
ERROR_INVALID_PRINTER_NAME = 1801

JOB_NAME = "epl2label"


class PrinterSink(Protocol):
    """Anything that can deliver raw job bytes to a named target."""

    def send(self, target: str, data: bytes) -> None: ...


def _kind_for_os_error(error: OSError) -> SendErrorKind:
    if isinstance(error, FileNotFoundError) or error.errno in (errno.ENOENT, errno.ENODEV, errno.ENXIO):
        return SendErrorKind.NOT_FOUND
    if isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
        return SendErrorKind.ACCESS_DENIED
    return SendErrorKind.IO_FAILURE


def write_job(path: Path, data: bytes, target: str) -> None:
    """Write ``data`` to ``path`` in one unbuffered write, mapping OS errors to SendError."""
    try:
        with path.open("wb", buffering=0) as handle:
            written = handle.write(data)
    except OSError as e:
        raise SendError(_kind_for_os_error(e), target, str(e)) from e

    if written is None or written < len(data):
        raise SendError(
            SendErrorKind.PARTIAL_WRITE,
            target,
            f"wrote {written or 0} of {len(data)} bytes",
        )


def sanitize_target(target: str) -> str:
    """Map a printer name to a file-name-safe stem."""
    stem = "".join(char if char.isascii() and char.isalnum() else "_" for char in target)
    return stem or "label"


class DeviceSink:
    """Writes jobs straight to a raw printer device such as ``/dev/usb/lp0``."""

    def send(self, target: str, data: bytes) -> None:
        path = Path(target)
        if not path.exists():
            raise SendError(SendErrorKind.NOT_FOUND, target, "device does not exist")

        write_job(path, data, target)
        logger.info("Job sent to device", target=target, size=len(data))


class FileSink:
    """Writes each job to ``<directory>/<target>_epl_output.bin``.

    Used for debugging and as the fallback when no printer is reachable.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, target: str) -> Path:
        return self.directory / f"{sanitize_target(target)}_epl_output.bin"

    def send(self, target: str, data: bytes) -> None:
        if not self.directory.is_dir():
            raise SendError(
                SendErrorKind.NOT_FOUND,
                target,
                f"output directory {self.directory} does not exist",
            )

        path = self.path_for(target)
        write_job(path, data, target)
        logger.info("Job written to file", target=target, path=str(path), size=len(data))


class SpoolerSink:
    """Sends jobs as RAW documents through the Windows print spooler."""

    def __init__(self, job_name: str = JOB_NAME) -> None:
        self.job_name = job_name

    def send(self, target: str, data: bytes) -> None:
        if win32print is None:
            raise SendError(
                SendErrorKind.IO_FAILURE,
                target,
                "win32print is required to send RAW jobs to the Windows spooler",
            )

        printer = (target or "").strip() or win32print.GetDefaultPrinter()
        try:
            handle = win32print.OpenPrinter(printer)
        except Exception as e:
            raise SendError(self._kind_for_win_error(e), printer, str(e)) from e

        try:
            win32print.StartDocPrinter(handle, 1, (self.job_name, None, "RAW"))
            try:
                win32print.StartPagePrinter(handle)
                try:
                    written = win32print.WritePrinter(handle, data)
                finally:
                    win32print.EndPagePrinter(handle)
            finally:
                win32print.EndDocPrinter(handle)
        except Exception as e:
            raise SendError(self._kind_for_win_error(e), printer, str(e)) from e
        finally:
            win32print.ClosePrinter(handle)

        if written < len(data):
            raise SendError(
                SendErrorKind.PARTIAL_WRITE,
                printer,
                f"spooler accepted {written} of {len(data)} bytes",
            )
        logger.info("Job sent to spooler", target=printer, size=len(data))

    @staticmethod
    def _kind_for_win_error(error: Exception) -> SendErrorKind:
        code = getattr(error, "winerror", None)
        if code is None and getattr(error, "args", None):
            code = error.args[0]
        if code == ERROR_INVALID_PRINTER_NAME:
            return SendErrorKind.NOT_FOUND
        if code == ERROR_ACCESS_DENIED:
            return SendErrorKind.ACCESS_DENIED
        return SendErrorKind.IO_FAILURE


def default_sink(fallback_dir: Path | None = None) -> PrinterSink:
    """The spooler on Windows, a file sink in ``fallback_dir`` (or cwd) elsewhere."""
    if sys.platform == "win32":
        return SpoolerSink()
    return FileSink(fallback_dir or Path.cwd())
