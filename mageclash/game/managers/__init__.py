"""Manager systems for combat coordination.

This package contains the manager classes that coordinate a combat through
the event-driven architecture:
- combat_manager.py: Phase state machine and orchestration
- log_manager.py: Buffered, filterable combat log
"""

from .combat_manager import CombatManager
from .log_manager import LogManager, LogLevel, LogCategory, LogEntry

__all__ = [
    "CombatManager",
    "LogManager",
    "LogLevel",
    "LogCategory",
    "LogEntry",
]
