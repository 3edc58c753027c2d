"""Alias hashing and commitment fingerprint derivation.

    fingerprint = sha256(alias_hash(32 bytes) || identity bytes || salt as uint256 big-endian)

The claimant identity is a hashed input, so only the identity that computed a
fingerprint can reproduce it at finalize time.
"""

import hashlib
import re
from .canonical import normalize

SALT_BITS = 256
_HEX_RE = re.compile(r'^(?:[0-9a-fA-F]{2})+$')
_FINGERPRINT_RE = re.compile(r'^[0-9a-fA-F]{64}$')


def normalize_alias(alias: str) -> str:
    """Validate an alias and return its NFC form."""
    if not alias or not isinstance(alias, str):
        raise ValueError("NameRegistrar: alias is required and must be a non-empty string")
    return normalize(alias)


def normalize_identity(identity: str) -> str:
    """Validate a hex identity and return it lowercased."""
    if not isinstance(identity, str) or not _HEX_RE.match(identity):
        raise ValueError("NameRegistrar: identity must be a non-empty hex string")
    return identity.lower()


def normalize_fingerprint(fingerprint: str) -> str:
    """Validate a 32-byte hex fingerprint and return it lowercased."""
    if not isinstance(fingerprint, str) or not _FINGERPRINT_RE.match(fingerprint):
        raise ValueError("NameRegistrar: fingerprint must be a 64-character hex string")
    return fingerprint.lower()


def alias_hash(alias: str) -> str:
    """Compute the SHA-256 hash of an alias (NFC-normalized, UTF-8)."""
    return hashlib.sha256(normalize_alias(alias).encode("utf-8")).hexdigest()


def derive_fingerprint(alias: str, identity: str, salt: int) -> str:
    """Derive the commitment fingerprint for alias + identity + salt."""
    return fingerprint_from_hash(alias_hash(alias), identity, salt)


def fingerprint_from_hash(alias_hash_hex: str, identity: str, salt: int) -> str:
    if isinstance(salt, bool) or not isinstance(salt, int):
        raise ValueError("NameRegistrar: salt must be an integer")
    if salt < 0 or salt >= 2 ** SALT_BITS:
        raise ValueError(f"NameRegistrar: salt must be in [0, 2**{SALT_BITS})")

    h = hashlib.sha256()
    h.update(bytes.fromhex(alias_hash_hex))
    h.update(bytes.fromhex(normalize_identity(identity)))
    h.update(salt.to_bytes(SALT_BITS // 8, "big"))
    return h.hexdigest()
