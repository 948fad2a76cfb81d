"""Command-line interface for epl2label.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Single labels from --product options
- Batch files sharing one font
- Dry runs and PNG previews of the planned label
- File fallback when no printer is reachable
"""

from epl2label.cli.app import cli, main

__all__ = ["cli", "main"]
