"""Utility functions for epl2label.

This module provides utility functions including:

- Logging setup and configuration
- Run statistics for the CLI
"""

from epl2label.utils.logging import JobStats, configure_logging

__all__ = [
    "JobStats",
    "configure_logging",
]
