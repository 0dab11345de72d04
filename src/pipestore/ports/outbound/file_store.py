"""File Store port for whole-file text I/O.

This outbound port defines the contract for the backing file of a
database. The record store never edits the file in place: it reads every
line on load and replaces the whole content on flush.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol


class FileStore(Protocol):
    """Protocol for whole-file line storage.

    Implementations translate OS failures into ``StorageIOError``.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Return the path of the backing file."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Check whether the backing file exists."""
        ...

    @abstractmethod
    def read_lines(self) -> list[str]:
        """Read the file and split it into lines without terminators.

        Raises:
            StorageIOError: If the file cannot be read.
        """
        ...

    @abstractmethod
    def write_lines(self, lines: list[str]) -> int:
        """Replace the whole file content with ``lines``.

        The replacement must be atomic: readers see either the old or the
        new content, never a mix.

        Returns:
            Number of bytes written.

        Raises:
            StorageIOError: If the write fails. The previous content is kept.
        """
        ...

    @abstractmethod
    def create(self, lines: list[str]) -> None:
        """Create the file with ``lines``, failing if it already exists.

        Raises:
            FileExistsError: If the file already exists.
            StorageIOError: If the file cannot be created.
        """
        ...
