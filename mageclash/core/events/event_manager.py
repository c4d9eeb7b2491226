"""
Event bus for the combat core.

Controllers publish domain and log events here instead of calling the log
manager or the UI directly. Events are queued and delivered in priority
order by ``process_events``; ``publish_immediate`` bypasses the queue.
"""

import itertools
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Delivery priority of a queued event (higher value is delivered first)."""
    LOW = 1
    NORMAL = 2
    HIGH = 3
    CRITICAL = 4


_sequence = itertools.count()


@dataclass
class QueuedEvent:
    """An event waiting in the queue."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    source: Optional[str] = None
    sequence: int = field(default_factory=lambda: next(_sequence))

    def __lt__(self, other: "QueuedEvent") -> bool:
        if self.priority.value != other.priority.value:
            return self.priority.value > other.priority.value
        return self.sequence < other.sequence


EventSubscriber = Callable[["GameEvent"], None]


class EventManager:
    """Queued publish/subscribe bus shared by one combat and its observers."""

    def __init__(self, enable_debug_logging: bool = False):
        """Initialize the event manager.

        Args:
            enable_debug_logging: Trace every subscription and delivery through
                the debug callback, not only subscriber failures
        """
        self.enable_debug_logging = enable_debug_logging
        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)
        self._queue: list[QueuedEvent] = []
        self._lock = threading.RLock()
        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Route bus diagnostics (e.g. to LogManager.debug)."""
        self._debug_callback = callback

    def _trace(self, message: str) -> None:
        if self.enable_debug_logging and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        with self._lock:
            self._subscribers[event_type].append(subscriber)
        name = subscriber_name or getattr(subscriber, "__name__", "anonymous")
        self._trace(f"{name} subscribed to {event_type.name}")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Remove a subscriber; False if it was not subscribed."""
        with self._lock:
            subscribers = self._subscribers.get(event_type, [])
            if subscriber not in subscribers:
                return False
            subscribers.remove(subscriber)
            return True

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event until the next ``process_events`` call."""
        with self._lock:
            self._queue.append(QueuedEvent(event=event, priority=priority, source=source or "unknown"))
        self._trace(f"Queued {event.__class__.__name__} from {source or 'unknown'} ({priority.name})")

    def publish_immediate(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Deliver an event right away, ahead of anything queued."""
        self._deliver(QueuedEvent(event=event, priority=EventPriority.CRITICAL, source=source or "immediate"))

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events, highest priority first.

        Args:
            max_events: Stop after this many deliveries, leaving the rest queued

        Returns:
            Number of events delivered
        """
        with self._lock:
            pending = sorted(self._queue)
            if max_events is not None:
                pending, self._queue = pending[:max_events], pending[max_events:]
            else:
                self._queue = []

        for queued in pending:
            self._deliver(queued)
        return len(pending)

    def _deliver(self, queued: QueuedEvent) -> None:
        event = queued.event
        with self._lock:
            subscribers = list(self._subscribers.get(event.event_type, []))

        self._trace(f"Delivering {event.__class__.__name__} from {queued.source} (turn {event.turn})")
        for subscriber in subscribers:
            try:
                subscriber(event)
            except Exception as e:
                # A broken observer must not abort combat resolution
                if self._debug_callback:
                    self._debug_callback(
                        f"[EVENT] {getattr(subscriber, '__name__', 'anonymous')} failed on "
                        f"{event.__class__.__name__}: {e}"
                    )

    def has_queued_events(self) -> bool:
        with self._lock:
            return bool(self._queue)

    def queued_count(self) -> int:
        with self._lock:
            return len(self._queue)
