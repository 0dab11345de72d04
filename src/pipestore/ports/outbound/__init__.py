"""Outbound ports - dependencies on external systems."""

from pipestore.ports.outbound.file_store import FileStore

__all__ = ["FileStore"]
