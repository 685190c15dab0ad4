"""
API layer for the harness.

Provides the `lk-harness` command line interface.
"""

from .cli import harness, main

__all__ = ["harness", "main"]
