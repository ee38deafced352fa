"""Server-Sent Events parser."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class SSEEvent:
    """Accumulated SSE event data."""

    event: str = "message"
    data: str = ""
    id: str = ""


def parse_sse_lines(lines: Iterator[str]) -> Iterator[SSEEvent]:
    """Parse raw SSE text lines into structured events.

    - Lines beginning with ``:`` are comments (ignored).
    - Blank lines dispatch the current event.
    - Field names: ``event``, ``data``, ``id``; others are ignored.
    - A leading space after the colon is stripped from the field value.
    """
    current = SSEEvent()
    data_parts: list[str] = []

    for raw_line in lines:
        line = raw_line.rstrip("\n").rstrip("\r")

        if line.startswith(":"):
            continue

        if line == "":
            if data_parts:
                current.data = "\n".join(data_parts)
                yield current
            current = SSEEvent()
            data_parts = []
            continue

        field_name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if field_name == "event":
            current.event = value
        elif field_name == "data":
            data_parts.append(value)
        elif field_name == "id":
            current.id = value

    # Stream ended without a trailing blank line
    if data_parts:
        current.data = "\n".join(data_parts)
        yield current
