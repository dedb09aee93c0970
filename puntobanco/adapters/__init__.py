"""
Platform adapters for the puntobanco engine.

This package provides adapters that translate between the table engine and
the platform presenting it.
"""

from puntobanco.adapters.base import BetRequest, PlatformAdapter
from puntobanco.adapters.cli import CLIAdapter
from puntobanco.adapters.dummy import DummyAdapter

__all__ = ["BetRequest", "PlatformAdapter", "CLIAdapter", "DummyAdapter"]
