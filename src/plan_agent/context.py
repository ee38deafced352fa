"""Context collection: the focused artifact plus any named files."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from plan_agent.files import FileReader
from plan_agent.models import UNTITLED, Artifact, ContextEntry

logger = logging.getLogger(__name__)


def collect_context(
    primary: Artifact,
    paths: Iterable[str],
    reader: FileReader,
) -> dict[str, ContextEntry]:
    """Gather the task context keyed by identifier.

    The primary artifact is always included with its live content and handle.
    Each additional path is included as a read-only snapshot only if it exists,
    is not the primary artifact and was not collected already. Missing,
    duplicate or unreadable paths are skipped without error.
    """
    context: dict[str, ContextEntry] = {
        primary.identifier: ContextEntry(content=primary.content, handle=primary.handle),
    }

    for path in paths:
        if path in context:
            logger.debug("Skipping duplicate context path: %s", path)
            continue
        if not reader.exists(path):
            logger.debug("Skipping missing context path: %s", path)
            continue
        content = reader.read_all(path)
        if content is None:
            logger.debug("Skipping unreadable context path: %s", path)
            continue
        context[path] = ContextEntry(content=content)

    return context


def _is_placeholder(identifier: str, entry: ContextEntry) -> bool:
    return identifier == UNTITLED and not entry.content and entry.handle is None


def render_context(context: dict[str, ContextEntry]) -> str:
    """Render every entry as its identifier followed by a fenced content block.

    An empty untitled placeholder (nothing focused) renders as nothing.
    """
    blocks = []
    for identifier, entry in context.items():
        if _is_placeholder(identifier, entry):
            continue
        blocks.append(f"File: {identifier}\n```\n{entry.content}\n```")
    return "\n\n".join(blocks)
