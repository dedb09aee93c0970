"""
Event system for the puntobanco engine.

This package provides the event system that table operations and engines
publish through.
"""

from puntobanco.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
