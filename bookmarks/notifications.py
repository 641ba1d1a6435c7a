"""Notification events and the sinks that present them."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import List, Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from bookmarks.ui_helpers import get_output_mode

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = DEFAULT
    duration: Optional[int] = None  # milliseconds; None lets the sink decide


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


class RecordingNotifier:
    """Collects notifications in order instead of showing them."""

    def __init__(self) -> None:
        self.events: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.events.append(notification)

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.events]

    def clear(self) -> None:
        self.events.clear()


class ConsoleNotifier:
    """Prints notifications in the current CLI output mode.

    - plain: ``Title: description``
    - json: one JSON object per line
    - rich: a coloured panel
    """

    def __init__(self, console: Optional[Console] = None, mode: Optional[str] = None) -> None:
        self.console = console or Console()
        self.mode = mode

    def notify(self, notification: Notification) -> None:
        mode = self.mode or get_output_mode()
        if mode == "json":
            print(json.dumps({"notification": asdict(notification)}, ensure_ascii=False))
        elif mode == "rich":
            style = "red" if notification.variant == DESTRUCTIVE else "green"
            self.console.print(Panel.fit(escape(notification.description), title=escape(notification.title), border_style=style))
        else:
            print(f"{notification.title}: {notification.description}")
