"""Content sources: where game documents come from.

A source lists document names and reads their text. The pipeline only
talks to this interface, so collections can be built over a directory on
disk (:class:`DirectorySource`) or an in-memory mapping
(:class:`MemorySource`) in tests.

Document names are file names (``2024-09-07-georgia.md``); only ``.md``
files count as documents.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

MARKDOWN_SUFFIX = ".md"


@runtime_checkable
class ContentSource(Protocol):
    """Directory-listing + file-read capability."""

    @property
    def label(self) -> str:
        """Human-readable name of the source (a path, or ``memory:...``)."""
        ...

    def list_documents(self) -> list[str]:
        """Names of the markdown documents, sorted."""
        ...

    def read(self, name: str) -> str:
        """Text of document *name*.

        Raises:
            OSError: If the document cannot be read.
        """
        ...

    def describe(self, name: str) -> str:
        """Location of document *name* for messages."""
        ...


class DirectorySource:
    """Markdown files directly inside one directory (not recursive).

    A missing directory is an empty source.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def label(self) -> str:
        return str(self.root)

    def list_documents(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            path.name
            for path in self.root.iterdir()
            if path.is_file() and path.suffix == MARKDOWN_SUFFIX
        )

    def read(self, name: str) -> str:
        return self.path_for(name).read_text(encoding="utf-8")

    def describe(self, name: str) -> str:
        return str(self.path_for(name))

    def path_for(self, name: str) -> Path:
        """Resolve *name* inside the root, refusing path traversal."""
        path = self.root / name
        if not path.resolve().is_relative_to(self.root.resolve()):
            msg = f"Path escapes content directory: {name}"
            raise ValueError(msg)
        return path


class MemorySource:
    """Documents held in a ``{name: text}`` mapping."""

    def __init__(self, documents: Mapping[str, str] | None = None, *, label: str = "memory") -> None:
        self._documents = dict(documents or {})
        self._label = label

    @property
    def label(self) -> str:
        return f"memory:{self._label}"

    def list_documents(self) -> list[str]:
        return sorted(name for name in self._documents if name.endswith(MARKDOWN_SUFFIX))

    def read(self, name: str) -> str:
        try:
            return self._documents[name]
        except KeyError:
            msg = f"No such document: {name}"
            raise FileNotFoundError(msg) from None

    def describe(self, name: str) -> str:
        return f"{self.label}/{name}"

    def add(self, name: str, text: str) -> None:
        self._documents[name] = text
