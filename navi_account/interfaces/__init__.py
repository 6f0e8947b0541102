"""Protocol interfaces for the lending account client."""
from .chain import LedgerClient
from .signer import Signer

__all__ = ["LedgerClient", "Signer"]
