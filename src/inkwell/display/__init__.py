"""
Rich-based display system for inkwell.

This module provides terminal output using the Rich library: the log
handler of the command line tool and the end-of-run report.
"""

from .constants import EMOJI_MAP, STYLES
from .report import ReportEntry, RunReport
from .rich_logger import setup_rich_logger


__all__ = [
    "EMOJI_MAP",
    "STYLES",
    "ReportEntry",
    "RunReport",
    "setup_rich_logger",
]
