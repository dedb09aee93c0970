"""
Async engine for puntobanco.

This package drives a baccarat table on behalf of a platform adapter,
pacing the reveal of each round.
"""

from puntobanco.engine.base import TableEngine
from puntobanco.engine.baccarat import BaccaratEngine

__all__ = ["TableEngine", "BaccaratEngine"]
