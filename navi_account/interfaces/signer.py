"""Signer protocol — key material behind an address."""
from typing import Protocol


class Signer(Protocol):
    """Abstract interface for signing transaction bytes."""

    @property
    def address(self) -> str: ...

    def sign_transaction(self, tx_bytes: bytes) -> str: ...
