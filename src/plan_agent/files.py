"""File-read collaborators used for context gathering."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol


class FileReader(Protocol):
    """Protocol for read-only file access.

    The agent never writes through this interface.
    """

    def exists(self, path: str) -> bool: ...
    def read_all(self, path: str) -> str | None: ...


class LocalFileReader:
    """Reads files from the local filesystem, relative to a working directory."""

    def __init__(self, working_dir: str | None = None) -> None:
        self._working_dir = working_dir or os.getcwd()

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read_all(self, path: str) -> str | None:
        """Return the whole file as text, or None when it cannot be read."""
        try:
            return self._resolve(path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    @property
    def working_directory(self) -> str:
        return self._working_dir

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        if p.is_absolute():
            return p
        return Path(self._working_dir) / p


class StubFileReader:
    """Test stub serving files from an in-memory mapping.

    Paths listed in ``unreadable`` report as existing but fail to read.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        unreadable: set[str] | None = None,
    ) -> None:
        self._files: dict[str, str] = dict(files) if files else {}
        self._unreadable = set(unreadable) if unreadable else set()
        self._reads: list[str] = []

    def exists(self, path: str) -> bool:
        return path in self._files or path in self._unreadable

    def read_all(self, path: str) -> str | None:
        self._reads.append(path)
        if path in self._unreadable:
            return None
        return self._files.get(path)

    @property
    def reads(self) -> list[str]:
        """All paths passed to read_all, in order."""
        return list(self._reads)
