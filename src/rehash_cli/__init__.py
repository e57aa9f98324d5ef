"""Rehash CLI - post-build content fingerprint reconciliation."""

from .version import __version__

__all__ = ['__version__']
