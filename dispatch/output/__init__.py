"""Output abstraction layer."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .status import ConsoleStatusSink, MemoryStatusSink, StatusEvent, StatusSink

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "ConsoleStatusSink",
    "MemoryStatusSink",
    "StatusEvent",
    "StatusSink",
]
