"""Adapters layer - concrete implementations of ports.

Outbound adapters:
    - TextFileStore: whole-file text storage with atomic replace
"""
