"""
inkwell CLI module.

This module provides the Click-based command-line interface for inkwell.
"""

from .commands import cli


__all__ = ["cli"]
