"""
Event system for the puntobanco engine.

This module provides the publish/subscribe layer that table operations
report through. Presentation code subscribes to it instead of polling the
table state.
"""

from collections import defaultdict
from typing import Any, Dict, Callable, Optional, Union
import threading
import logging
from enum import Enum

# Create a logger for the event system
logger = logging.getLogger("puntobanco.events")


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


class EventEmitter:
    """
    Event emitter for the puntobanco engine.

    Features:
    - Supports event subscription with priorities
    - Allows once-only subscriptions
    - Supports subscribing to all events with event type filtering in handler
    - Thread-safe listener registration
    """

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners = defaultdict(list)
        self._global_listeners = []
        self._listener_lock = threading.RLock()

        # Context attached to every emitted payload
        self._game_id: Optional[str] = None
        self._round_id: Optional[str] = None

    def set_context(self, game_id: str, round_id: Optional[str]) -> None:
        """
        Set the context for events emitted by this object.

        Args:
            game_id: The unique identifier for the table session
            round_id: The identifier for the current round
        """
        self._game_id = game_id
        self._round_id = round_id

    def on(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call when event occurs, signature: fn(event_data)
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        handler = {"callback": callback, "priority": priority.value}

        with self._listener_lock:
            # Insert handler in order of priority (higher numbers first)
            handlers = self._listeners[event_type]
            for i, existing in enumerate(handlers):
                if existing["priority"] < priority.value:
                    handlers.insert(i, handler)
                    break
            else:
                handlers.append(handler)

        def unsubscribe():
            with self._listener_lock:
                handlers = self._listeners[event_type]
                for i, existing in enumerate(handlers):
                    if existing["callback"] == callback:
                        handlers.pop(i)
                        break

        return unsubscribe

    def once(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type for a single occurrence.

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        unsubscribe_ref = []

        def one_time_handler(event_data):
            try:
                callback(event_data)
            finally:
                if unsubscribe_ref and callable(unsubscribe_ref[0]):
                    unsubscribe_ref[0]()

        unsubscribe_ref.append(self.on(event_type, one_time_handler, priority))
        return unsubscribe_ref[0]

    def on_any(
        self, callback: Callable, priority: EventPriority = EventPriority.NORMAL
    ) -> Callable:
        """
        Subscribe to all events.

        Args:
            callback: Function to call for any event, signature: fn((event_type, event_data))
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        handler = {"callback": callback, "priority": priority.value}

        with self._listener_lock:
            for i, existing in enumerate(self._global_listeners):
                if existing["priority"] < priority.value:
                    self._global_listeners.insert(i, handler)
                    break
            else:
                self._global_listeners.append(handler)

        def unsubscribe():
            with self._listener_lock:
                for i, existing in enumerate(self._global_listeners):
                    if existing["callback"] == callback:
                        self._global_listeners.pop(i)
                        break

        return unsubscribe

    def emit(self, event_type: Union[str, Enum], data: Dict[str, Any]) -> None:
        """
        Emit an event to all registered listeners.

        Handler failures are logged and do not interrupt the emitter.

        Args:
            event_type: The type of event to emit
            data: The data to include with the event
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        if self._game_id is not None:
            data = {"game_id": self._game_id, "round_id": self._round_id, **data}

        handlers_to_call = []

        with self._listener_lock:
            for handler in self._listeners.get(event_type, []):
                handlers_to_call.append((handler["callback"], data))
            for handler in self._global_listeners:
                handlers_to_call.append((handler["callback"], (event_type, data)))

        # Call handlers outside of the lock to avoid deadlocks
        for callback, args in handlers_to_call:
            try:
                callback(args)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event_type}: {e}", exc_info=True
                )

    async def emit_async(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Emit an event from a coroutine. Handlers still run sequentially.
        """
        self.emit(event_type, data)

    def listener_count(self, event_type: Optional[Union[str, Enum]] = None) -> int:
        """Number of handlers for ``event_type``, or of every handler when omitted."""
        with self._listener_lock:
            if event_type is None:
                return sum(len(h) for h in self._listeners.values()) + len(
                    self._global_listeners
                )
            if isinstance(event_type, Enum):
                event_type = event_type.name
            return len(self._listeners.get(event_type, []))

    def remove_all_listeners(
        self, event_type: Optional[Union[str, Enum]] = None
    ) -> None:
        """
        Remove all listeners for a specific event type or all events.

        Args:
            event_type: Optional event type. If None, removes all listeners for all events.
        """
        with self._listener_lock:
            if event_type is None:
                self._listeners.clear()
                self._global_listeners.clear()
            else:
                if isinstance(event_type, Enum):
                    event_type = event_type.name
                self._listeners[event_type].clear()


class EventBus:
    """
    Global event bus for the application.

    This singleton class provides a centralized event bus that can be accessed
    from anywhere in the application.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        """
        Get the singleton instance of the EventBus.

        Returns:
            EventEmitter instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class EngineEventType(Enum):
    """
    Event types published by the baccarat table and engine.
    """

    # Lifecycle
    ENGINE_INIT = "engine_init"
    ENGINE_SHUTDOWN = "engine_shutdown"
    GAME_STARTED = "game_started"
    ROUND_STARTED = "round_started"
    ROUND_ENDED = "round_ended"
    PHASE_CHANGED = "phase_changed"

    # Betting
    PLAYER_BET = "player_bet"
    BET_CLEARED = "bet_cleared"
    SIDE_SELECTED = "side_selected"

    # Dealing
    SHUFFLE = "shuffle"
    CARD_REVEALED = "card_revealed"
    NATURAL_DECLARED = "natural_declared"
    THIRD_CARD_DRAWN = "third_card_drawn"
    SIDE_STANDS = "side_stands"

    # Money
    MONEY_PAYOUT = "money_payout"
    BANKROLL_UPDATED = "bankroll_updated"

    # Batch play
    AUTO_PLAY_STARTED = "auto_play_started"
    AUTO_PLAY_FINISHED = "auto_play_finished"

    # Rejections and failures
    WARNING = "warning"
    ERROR = "error"
