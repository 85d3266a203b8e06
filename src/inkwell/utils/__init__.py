"""Shared helpers for inkwell."""
