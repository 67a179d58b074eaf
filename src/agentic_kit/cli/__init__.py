"""
CLI layer for agentic-kit.

Provides a Typer application whose commands delegate to the operations
layer (``agentic_kit.ops``).  This package handles only terminal transport:
argument parsing, coloured output, and table formatting.

Entry point::

    agentic-kit --help
"""

from agentic_kit.cli.app import app

__all__ = ["app"]
