"""
Render sinks: where formatted messages end up.

A sink only needs `clear()` and `display(text)`; the service never looks up a
concrete output surface itself.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class RenderSink(Protocol):
    def clear(self) -> None: ...

    def display(self, text: str) -> None: ...


class ConsoleSink:
    """Writes each message as a line to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def clear(self) -> None:
        # Terminal output is append-only.
        return None

    def display(self, text: str) -> None:
        stream = self._stream or sys.stdout
        print(text, file=stream)


class HtmlSink:
    """Accumulates markup blocks, each wrapped in a `<div>`."""

    def __init__(self) -> None:
        self._blocks: list[str] = []

    def clear(self) -> None:
        self._blocks.clear()

    def display(self, text: str) -> None:
        self._blocks.append(f"<div>{text}</div>")

    @property
    def html(self) -> str:
        return "".join(self._blocks)


class MemorySink:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def clear(self) -> None:
        self.messages.clear()

    def display(self, text: str) -> None:
        self.messages.append(text)
