"""Storage access used by the raw schema loader."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class SchemaFileStore(Protocol):
    """Read-only storage holding schema documents."""

    def exists(self, path: str) -> bool: ...

    def list_subdirectories(self, path: str) -> list[str]: ...

    def read_text_file(self, path: str) -> str: ...

    def join(self, *parts: str) -> str: ...


class LocalSchemaFileStore:
    """Filesystem-backed schema store."""

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def list_subdirectories(self, path: str) -> list[str]:
        """Return the sorted names of the directories directly under `path`."""
        return sorted(entry.name for entry in Path(path).iterdir() if entry.is_dir())

    def read_text_file(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def join(self, *parts: str) -> str:
        return str(Path(*parts))
