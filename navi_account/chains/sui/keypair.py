"""Ed25519 keypair derived from a BIP-39 seed phrase along the Sui path."""
from __future__ import annotations

import base64
import hashlib
import hmac
import re
import struct

from mnemonic import Mnemonic
from nacl.signing import SigningKey

from .bcs import INTENT_TRANSACTION

ED25519_FLAG = 0x00
HARDENED_OFFSET = 0x80000000

_PATH_RE = re.compile(r"^m(/\d+')+$")


def derive_path(account_index: int) -> str:
    """Return the Sui Ed25519 derivation path for an account index."""
    if account_index < 0:
        raise ValueError("account_index must be non-negative")
    return f"m/44'/784'/0'/0'/{account_index}'"


def normalize_mnemonic(mnemonic: str) -> str:
    return " ".join(mnemonic.split())


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """BIP-39 seed for a phrase. The phrase itself is not validated here."""
    return Mnemonic.to_seed(normalize_mnemonic(mnemonic), passphrase)


def _master_key(seed: bytes) -> tuple[bytes, bytes]:
    digest = hmac.new(b"ed25519 seed", seed, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def derive_private_key(seed: bytes, path: str) -> bytes:
    """SLIP-0010 Ed25519 derivation. Only hardened segments are valid."""
    if not _PATH_RE.match(path):
        raise ValueError(f"Invalid hardened derivation path: {path}")

    key, chain_code = _master_key(seed)
    for segment in path.split("/")[1:]:
        index = int(segment.rstrip("'")) + HARDENED_OFFSET
        data = b"\x00" + key + struct.pack(">I", index)
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = digest[:32], digest[32:]
    return key


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


class Ed25519Keypair:
    """Signing identity for one derived account."""

    def __init__(self, private_key: bytes) -> None:
        self._signing_key = SigningKey(private_key)

    @classmethod
    def from_mnemonic(cls, mnemonic: str, account_index: int = 0) -> Ed25519Keypair:
        """Derive a keypair; the phrase must pass the BIP-39 wordlist and checksum."""
        phrase = normalize_mnemonic(mnemonic)
        if not Mnemonic("english").check(phrase):
            raise ValueError("Seed phrase is not a valid BIP-39 mnemonic")
        seed = mnemonic_to_seed(phrase)
        return cls(derive_private_key(seed, derive_path(account_index)))

    @property
    def public_key(self) -> bytes:
        return bytes(self._signing_key.verify_key)

    @property
    def address(self) -> str:
        """blake2b-256 over the scheme flag and the public key."""
        digest = blake2b_256(bytes([ED25519_FLAG]) + self.public_key)
        return "0x" + digest.hex()

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """Sign transaction data; returns the base64 serialized signature.

        The signed message is blake2b-256(intent || tx_bytes); the serialized
        signature is ``flag || signature || public_key``.
        """
        digest = blake2b_256(INTENT_TRANSACTION + tx_bytes)
        signature = self._signing_key.sign(digest).signature
        serialized = bytes([ED25519_FLAG]) + signature + self.public_key
        return base64.b64encode(serialized).decode()
