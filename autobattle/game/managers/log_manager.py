"""
Log management for battle messages and debugging.

Components never print battle messages themselves; they publish LogMessage
events and the LogManager collects them with a category and level so a
renderer can show recent lines and a run can be saved to disk.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.events.events import (
    EventType,
    LogMessage,
    LogSaveRequested,
)

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # Initialization, loading
    BATTLE = auto()     # Hits, defeats, outcomes
    PLACEMENT = auto()  # Unit placement and stage setup
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        try:
            return cls[name.upper()]
        except (KeyError, AttributeError):
            return cls.INFO


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.PLACEMENT: "PLC",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogEntry:
    """A single stored log line with metadata."""
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
    """Collects battle log messages published on the event bus."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_directory: str = "logs",
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager to receive log events from
            max_messages: Maximum number of messages kept in the buffer
            default_level: Minimum level returned by get_messages()
            log_directory: Directory save_log_to_file() writes into
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.event_manager = event_manager
        self.log_directory = log_directory

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request"
        )

    def _handle_log_message_event(self, event) -> None:
        if isinstance(event, LogMessage):
            try:
                category = LogCategory[event.category.upper()]
            except (KeyError, AttributeError):
                category = LogCategory.SYSTEM

            self.log(event.message, category, LogLevel.parse(event.level))

    def _handle_log_save_request(self, event) -> None:
        if isinstance(event, LogSaveRequested):
            self.save_log_to_file()

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM, level: LogLevel = LogLevel.INFO) -> None:
        """Add a message to the log."""
        if category == LogCategory.WARNING and level.value < LogLevel.WARNING.value:
            level = LogLevel.WARNING
        elif category == LogCategory.ERROR:
            level = LogLevel.ERROR
        self.messages.append(LogEntry(text=text, category=category, level=level))

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG, LogLevel.DEBUG)

    def get_messages(
        self,
        count: Optional[int] = None,
        categories: Optional[set[LogCategory]] = None
    ) -> list[LogEntry]:
        """Get recent messages filtered by category and level.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Categories to include (None for all)

        Returns:
            Matching messages, oldest first
        """
        filtered = [
            msg for msg in self.messages
            if (categories is None or msg.category in categories)
            and msg.level.value >= self.log_level.value
        ]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def save_log_to_file(self) -> Optional[str]:
        """Save every buffered message, ignoring filters, to a timestamped file.

        Returns:
            Path of the written file, or None if it could not be written
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(self.log_directory, f"battle_{timestamp}.log")

        try:
            os.makedirs(self.log_directory, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Autobattle - Battle Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [{msg.category.name}] [{msg.level.name}] {msg.text}\n")
        except OSError as e:
            self.log(f"Failed to save log file: {e}", LogCategory.ERROR)
            return None

        self.log(f"Battle log saved to {filepath}", LogCategory.SYSTEM)
        return filepath
