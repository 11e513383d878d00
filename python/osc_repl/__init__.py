"""
osc-repl console package.

Interactive console for sending OSC messages to a peer and watching what
comes back.  Use ``python -m osc_repl`` or the ``osc-repl`` script to
launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
