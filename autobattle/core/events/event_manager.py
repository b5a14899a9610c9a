"""
Event bus connecting the battle engine to its observers.

The driver publishes state-change records and log messages here instead of
calling renderers or loggers directly. Events wait in a FIFO queue until
process_events() hands them to the subscribers of their type.
"""

from collections import defaultdict, deque
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import BattleEvent, EventType


EventSubscriber = Callable[["BattleEvent"], None]


class EventManager:
    """Queued publish/subscribe bus for battle observers."""

    def __init__(self, enable_debug_logging: bool = False):
        """Initialize the event manager.

        Args:
            enable_debug_logging: Whether to report bus activity to the debug callback
        """
        self.enable_debug_logging = enable_debug_logging

        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)
        self._queue: deque[tuple["BattleEvent", str]] = deque()
        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Set the callback that receives bus activity and subscriber errors."""
        self._debug_callback = callback

    def _debug_log(self, message: str) -> None:
        if self.enable_debug_logging and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    def _report_error(self, subscriber: EventSubscriber, error: Exception) -> None:
        # Errors reach the callback even when bus tracing is off
        if self._debug_callback:
            name = getattr(subscriber, '__name__', 'anonymous')
            self._debug_callback(f"[EVENT] Error in subscriber {name}: {error}")

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name for debugging
        """
        self._subscribers[event_type].append(subscriber)
        name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
        self._debug_log(f"{name} subscribed to {event_type.name}")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Remove a subscriber; returns False if it was not subscribed."""
        subscribers = self._subscribers.get(event_type, [])
        if subscriber not in subscribers:
            return False
        subscribers.remove(subscriber)
        return True

    def publish(self, event: "BattleEvent", source: Optional[str] = None) -> None:
        """Queue an event for the next process_events() call."""
        self._queue.append((event, source or "unknown"))

    def process_events(self) -> int:
        """Deliver queued events in publish order until the queue is empty.

        Events published by a subscriber during delivery are delivered in the
        same call. A subscriber that raises is reported to the debug callback,
        even with tracing off, and does not stop delivery to the others.

        Returns:
            Number of events delivered
        """
        delivered = 0
        while self._queue:
            event, source = self._queue.popleft()
            delivered += 1
            self._debug_log(f"{event.__class__.__name__} from {source} (frame {event.frame})")

            # Copy so subscribers may unsubscribe while being notified
            for subscriber in list(self._subscribers.get(event.event_type, [])):
                try:
                    subscriber(event)
                except Exception as e:
                    self._report_error(subscriber, e)
        return delivered
