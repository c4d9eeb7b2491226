"""
Log management for combat messages and debugging.

This module collects the log events published by the combat core into a
bounded buffer with categorization and filtering, and can dump the buffer to
a timestamped file.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.events import DebugMessage, EventType, LogMessage, LogSaveRequested

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()   # Initialization, loading
    BATTLE = auto()   # Combat resolution
    BOSS = auto()     # Boss damage and phase transitions
    UNIT = auto()     # Allied unit activations
    EFFECT = auto()   # Status effects
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.BOSS: "BOS",
    LogCategory.UNIT: "UNT",
    LogCategory.EFFECT: "EFF",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class LogEntry:
    """A single buffered log message with metadata."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []
        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")
        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")
        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Buffers combat log events with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_dir: str = "logs",
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager the combat core logs through
            max_messages: Maximum number of messages kept in the buffer
            default_level: Minimum level returned by get_messages
            log_dir: Directory save_log_to_file writes into
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager
        self.log_dir = log_dir

        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.DEBUG_MESSAGE,
            self._handle_debug_message_event,
            subscriber_name="LogManager.debug_message"
        )
        self.event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request"
        )
        self.event_manager.set_debug_callback(self.debug)

    def _handle_log_message_event(self, event) -> None:
        if not isinstance(event, LogMessage):
            return
        try:
            category = LogCategory[event.category.upper()]
        except KeyError:
            category = LogCategory.SYSTEM
        try:
            level = LogLevel[event.level.upper()]
        except KeyError:
            level = LogLevel.INFO
        self.log(f"[{event.source}] {event.message}", category, level)

    def _handle_debug_message_event(self, event) -> None:
        if isinstance(event, DebugMessage):
            self.log(f"[{event.source}] {event.message}", LogCategory.DEBUG, LogLevel.DEBUG)

    def _handle_log_save_request(self, event) -> None:
        if isinstance(event, LogSaveRequested):
            if not self.save_log_to_file():
                self.error("Failed to save log file")

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM, level: LogLevel = LogLevel.INFO) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
            level: Severity used for filtering
        """
        self.messages.append(LogEntry(text=text, category=category, level=level))

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG, LogLevel.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING, LogLevel.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR, LogLevel.ERROR)

    def get_messages(
        self,
        count: Optional[int] = None,
        categories: Optional[set[LogCategory]] = None,
    ) -> list[LogEntry]:
        """Get recent messages, filtered by category and level.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Categories to include (None for all enabled)

        Returns:
            List of recent messages, oldest first
        """
        wanted = categories if categories else self.enabled_categories
        filtered = [
            msg for msg in self.messages
            if msg.category in wanted
            and msg.category in self.enabled_categories
            and msg.level.value >= self.log_level.value
        ]
        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return LogCategory.DEBUG in self.enabled_categories and self.log_level == LogLevel.DEBUG

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self) -> bool:
        """Save every buffered message to a timestamped log file.

        Returns:
            True if save was successful, False otherwise
        """
        now = datetime.now()
        filepath = os.path.join(self.log_dir, f"combat_{now.strftime('%Y%m%d_%H%M%S')}.log")
        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Mageclash - Combat Log\n")
                f.write(f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")
                if not self.messages:
                    f.write("No messages to save.\n")
                # Ignore current filters so debug lines are kept too
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return False

        self.system(f"Combat log saved to {filepath}")
        return True
