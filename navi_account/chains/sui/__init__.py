"""SUI chain support."""
from .client import SuiClient
from .draft import TransactionDraft
from .keypair import Ed25519Keypair

__all__ = ["SuiClient", "TransactionDraft", "Ed25519Keypair"]
