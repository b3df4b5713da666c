"""
Wallet identifier helpers.

A wallet's public hash is the hex SHA-256 digest of a throwaway ed25519 public
key. It is a pseudonymous handle only; the private key is discarded.
"""

from __future__ import annotations

import hashlib
import re

from solders.keypair import Keypair

PUBLIC_HASH_LENGTH = 64
_PUBLIC_HASH_RE = re.compile(r"^[0-9a-f]{64}$")


def new_public_hash() -> str:
    """Generate a fresh 64-character lowercase hex wallet hash."""
    public_key = bytes(Keypair().pubkey())
    return hashlib.sha256(public_key).hexdigest()


def is_valid_public_hash(value: str) -> bool:
    return bool(_PUBLIC_HASH_RE.match(value or ""))
