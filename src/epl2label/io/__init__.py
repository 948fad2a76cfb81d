"""I/O layer for epl2label.

This module handles everything that crosses the composition boundary:
decoding fonts with fonttools, serializing planned labels into EPL2 bytes,
previewing them, and delivering finished jobs to printers or files.

Key responsibilities:
- Decode and validate font bytes once per batch
- Emit EPL2 directives and GW raster blocks
- Send jobs through the Windows spooler, a raw device or a file

Key classes:
- Epl2Emitter: Append-only EPL2 job builder
- SpoolerSink, DeviceSink, FileSink: Printer sinks
"""

from epl2label.io.epl import Epl2Emitter, emit_document, iter_directives
from epl2label.io.font import decode_font, load_font
from epl2label.io.sink import (
    DeviceSink,
    FileSink,
    PrinterSink,
    SpoolerSink,
    default_sink,
    write_job,
)

__all__ = [
    "DeviceSink",
    "Epl2Emitter",
    "FileSink",
    "PrinterSink",
    "SpoolerSink",
    "decode_font",
    "default_sink",
    "emit_document",
    "iter_directives",
    "load_font",
    "write_job",
]
