"""Append-only status sink for the gateway.

Connection handlers run concurrently and report what they did here. The sink
is the only thing handlers write to; it never feeds back into serving.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

from dispatch.output.console import ConsoleProtocol, Style

__all__ = [
    "StatusEvent",
    "StatusSink",
    "ConsoleStatusSink",
    "MemoryStatusSink",
]


@dataclass(frozen=True, slots=True)
class StatusEvent:
    kind: Literal["start", "done", "error", "note"]
    client: str
    detail: str


class StatusSink(Protocol):
    def connection_started(self, client: str, asset: str) -> None: ...

    def connection_finished(self, client: str, asset: str, sent: int) -> None: ...

    def connection_failed(self, client: str, reason: str) -> None: ...

    def note(self, message: str) -> None: ...


class ConsoleStatusSink:
    """Formats status events as console lines."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def connection_started(self, client: str, asset: str) -> None:
        self._console.print(f"{client} -> {asset}", Style.DIM)

    def connection_finished(self, client: str, asset: str, sent: int) -> None:
        self._console.success(f"{client} <- {asset} ({sent} bytes)")

    def connection_failed(self, client: str, reason: str) -> None:
        self._console.error(f"{client}: {reason}")

    def note(self, message: str) -> None:
        self._console.info(message)


def _empty_events() -> list[StatusEvent]:
    return []


@dataclass
class MemoryStatusSink:
    """Sink that records events for tests."""

    events: list[StatusEvent] = field(default_factory=_empty_events)

    def connection_started(self, client: str, asset: str) -> None:
        self.events.append(StatusEvent("start", client, asset))

    def connection_finished(self, client: str, asset: str, sent: int) -> None:
        self.events.append(StatusEvent("done", client, f"{asset}:{sent}"))

    def connection_failed(self, client: str, reason: str) -> None:
        self.events.append(StatusEvent("error", client, reason))

    def note(self, message: str) -> None:
        self.events.append(StatusEvent("note", "", message))

    def kinds(self) -> list[str]:
        return [e.kind for e in self.events]
