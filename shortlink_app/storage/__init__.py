"""
Persistence for the link store.

The forward index is written to a JSON file; the reverse index is
never stored and is rebuilt on load.
"""

from . import codec

__all__ = ["codec"]
