"""
Content store access for the site generator.

The generator never touches the filesystem directly; everything goes
through a ContentStore addressed with slash-separated paths relative to
the content root ("" is the root itself).  LocalContentStore is the
adapter used for standalone builds.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

# Hidden/system entries never take part in a build
IGNORE_DIRS = {".obsidian", ".excalidraw", ".git", ".trash"}
IGNORE_FILES = {".DS_Store"}


class ContentStoreError(OSError):
    """Raised when a path cannot be mapped into the store."""


@dataclass(frozen=True)
class StoredFile:
    path: str
    mtime: float


class ContentStore(ABC):
    """Narrow file API the generator relies on."""

    @abstractmethod
    def list_files(self) -> list[StoredFile]:
        """Every file in the store, sorted by path."""

    @abstractmethod
    def list_dir(self, path: str) -> tuple[list[str], list[str]]:
        """Direct children of *path* as (files, folders), full store paths.

        A symlink is always listed as a file, even when it points at a
        directory, so recursive removal never walks out through it.
        """

    @abstractmethod
    def exists(self, path: str) -> bool: ...

    @abstractmethod
    def read_text(self, path: str) -> str: ...

    @abstractmethod
    def read_binary(self, path: str) -> bytes: ...

    @abstractmethod
    def write_text(self, path: str, content: str) -> None: ...

    @abstractmethod
    def write_binary(self, path: str, content: bytes) -> None: ...

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create *path* and any missing parents."""

    @abstractmethod
    def rmdir(self, path: str) -> None:
        """Remove an empty directory."""

    @abstractmethod
    def remove(self, path: str) -> None:
        """Remove a single file or empty directory (never recursive)."""


class LocalContentStore(ContentStore):
    """ContentStore backed by a directory on the local filesystem."""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        # Lexical normalisation only: a symlink is addressed as itself
        target = Path(os.path.normpath(self.root / path.strip("/"))) if path else self.root
        if target != self.root and self.root not in target.parents:
            raise ContentStoreError(f"Path escapes content root: {path!r}")
        return target

    def _relative(self, target: Path) -> str:
        return target.relative_to(self.root).as_posix()

    def list_files(self) -> list[StoredFile]:
        files = []
        for entry in self.root.rglob("*"):
            rel = entry.relative_to(self.root)
            if any(part in IGNORE_DIRS for part in rel.parts[:-1]):
                continue
            if not entry.is_file() or entry.name in IGNORE_FILES:
                continue
            files.append(StoredFile(rel.as_posix(), entry.stat().st_mtime))
        return sorted(files, key=lambda f: f.path)

    def list_dir(self, path: str) -> tuple[list[str], list[str]]:
        files, folders = [], []
        for entry in sorted(self._resolve(path).iterdir()):
            if entry.is_dir() and not entry.is_symlink():
                folders.append(self._relative(entry))
            else:
                files.append(self._relative(entry))
        return files, folders

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def read_text(self, path: str) -> str:
        return self._resolve(path).read_text(encoding="utf-8")

    def read_binary(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def write_text(self, path: str, content: str) -> None:
        self._resolve(path).write_text(content, encoding="utf-8")

    def write_binary(self, path: str, content: bytes) -> None:
        self._resolve(path).write_bytes(content)

    def mkdir(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    def rmdir(self, path: str) -> None:
        self._resolve(path).rmdir()

    def remove(self, path: str) -> None:
        target = self._resolve(path)
        if target.is_dir() and not target.is_symlink():
            target.rmdir()
        else:
            target.unlink()

