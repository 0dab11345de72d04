"""Text file store implementation.

This adapter implements the FileStore protocol with standard file I/O on
a single newline-separated text file.

Write Protocol:
    1. Write the full content to a temporary file in the same directory
    2. fsync the temporary file (unless sync_mode is 'none')
    3. Atomically rename it over the database file

A failure at any step leaves the original file untouched.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pipestore.infrastructure.logging import get_logger
from pipestore.ports.inbound.record_store import StorageIOError

logger = get_logger(__name__)


class TextFileStore:
    """File-based implementation of the FileStore protocol.

    Attributes:
        path: Path to the database file.
        encoding: Text encoding used for reads and writes.
    """

    def __init__(
        self,
        file_path: str | Path,
        encoding: str = "utf-8",
        sync_mode: str = "fsync",
    ) -> None:
        """Initialize the file store.

        Args:
            file_path: Path to the database file.
            encoding: Text encoding of the file.
            sync_mode: 'fsync' to fsync before rename, 'none' to skip it.
        """
        self._path = Path(file_path)
        self._encoding = encoding
        self._sync = sync_mode == "fsync"

    @property
    def path(self) -> Path:
        """Get the database file path."""
        return self._path

    @property
    def encoding(self) -> str:
        return self._encoding

    def exists(self) -> bool:
        return self._path.is_file()

    def read_lines(self) -> list[str]:
        """Read all lines, accepting both LF and CRLF terminators.

        Only ``\\n`` ends a line; other Unicode line separators stay inside
        the line they appear in.
        """
        try:
            with open(self._path, encoding=self._encoding, newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Failed to read {self._path}: {e}") from e

        if not content:
            return []
        lines = content.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    def write_lines(self, lines: list[str]) -> int:
        """Atomically replace the file with ``lines``."""
        data = self._render(lines)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
        except OSError as e:
            raise StorageIOError(f"Failed to write {self._path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
                tmp.flush()
                if self._sync:
                    os.fsync(tmp.fileno())
            os.replace(tmp_name, self._path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageIOError(f"Failed to write {self._path}: {e}") from e

        logger.debug("file_written", path=str(self._path), bytes=len(data))
        return len(data)

    def create(self, lines: list[str]) -> None:
        """Create the file exclusively."""
        data = self._render(lines)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "xb") as f:
                f.write(data)
                f.flush()
                if self._sync:
                    os.fsync(f.fileno())
        except FileExistsError:
            raise
        except OSError as e:
            raise StorageIOError(f"Failed to create {self._path}: {e}") from e

        logger.debug("file_created", path=str(self._path))

    def _render(self, lines: list[str]) -> bytes:
        text = "\n".join(lines)
        if lines:
            text += "\n"
        try:
            return text.encode(self._encoding)
        except UnicodeEncodeError as e:
            raise StorageIOError(
                f"Content cannot be encoded as {self._encoding}: {e}"
            ) from e
