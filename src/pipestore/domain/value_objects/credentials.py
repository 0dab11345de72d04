"""Plaintext credentials stored in the auth header line."""

from __future__ import annotations

import hmac
from dataclasses import dataclass

AUTH_PREFIX = "#AUTH"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Username and password gating access to a database file.

    The header line is ``#AUTH|username:<u>|password:<p>``. Neither value may
    contain the field separator or a line break.
    """

    username: str
    password: str

    def __post_init__(self) -> None:
        for label, value in (("username", self.username), ("password", self.password)):
            if not isinstance(value, str) or not value:
                raise ValueError(f"{label} must be a non-empty string")
            if any(ch in value for ch in ("|", "\n", "\r")):
                raise ValueError(f"{label} contains a reserved character")

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"

    def matches(self, other: Credentials) -> bool:
        """Compare in constant time."""
        return hmac.compare_digest(
            self.username.encode(), other.username.encode()
        ) & hmac.compare_digest(self.password.encode(), other.password.encode())

    def to_header(self) -> str:
        return f"{AUTH_PREFIX}|username:{self.username}|password:{self.password}"

    @classmethod
    def from_header(cls, line: str) -> Credentials:
        """Parse an auth header line.

        Raises:
            ValueError: If the line is not a well-formed auth header.
        """
        parts = line.split("|")
        if parts[0] != AUTH_PREFIX:
            raise ValueError("Not an auth header")

        fields: dict[str, str] = {}
        for part in parts[1:]:
            key, sep, value = part.partition(":")
            if sep:
                fields[key] = value

        if "username" not in fields or "password" not in fields:
            raise ValueError("Auth header is missing username or password")
        return cls(username=fields["username"], password=fields["password"])

    @classmethod
    def from_pair(cls, username: str | None, password: str | None) -> Credentials | None:
        """Build credentials from optional arguments.

        Returns None when neither is given.

        Raises:
            ValueError: If only one of the two is given.
        """
        if username is None and password is None:
            return None
        if username is None or password is None:
            raise ValueError("username and password must be supplied together")
        return cls(username=username, password=password)
