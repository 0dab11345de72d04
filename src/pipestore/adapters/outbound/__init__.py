"""Outbound adapters - implementations of outbound ports."""

from pipestore.adapters.outbound.text_file_store import TextFileStore

__all__ = ["TextFileStore"]
