"""Ed25519 caller identities and signed call envelopes.

An identity is the hex-encoded raw public key. A transport proves who is
calling by passing a signed envelope, which relayers cannot alter.
"""

from cryptography.exceptions import InvalidSignature as _BadSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives import serialization
from .canonical import canonical
from .errors import InvalidSignature

PROTOCOL_VERSION = '1.0.0'


def generate_keypair() -> dict:
    """Generate a new Ed25519 keypair. Returns { public_key, private_key } as hex."""
    private_key = Ed25519PrivateKey.generate()

    return {
        "public_key": _public_hex(private_key),
        "private_key": private_key.private_bytes(
            serialization.Encoding.Raw,
            serialization.PrivateFormat.Raw,
            serialization.NoEncryption()
        ).hex()
    }


def identity_of(private_key_hex: str) -> str:
    """The identity (public key hex) belonging to a private key."""
    return _public_hex(Ed25519PrivateKey.from_private_bytes(bytes.fromhex(private_key_hex)))


def sign_call(operation: str, params: dict, private_key_hex: str) -> dict:
    """Sign a registrar call. Returns { call, identity, signature, protocol_version }."""
    if not operation or not isinstance(operation, str):
        raise ValueError("NameRegistrar: operation is required")

    private_key = Ed25519PrivateKey.from_private_bytes(bytes.fromhex(private_key_hex))
    call = {"operation": operation, "params": dict(params or {})}
    signature = private_key.sign(canonical(call).encode("utf-8"))

    return {
        "call": call,
        "identity": _public_hex(private_key),
        "signature": signature.hex(),
        "protocol_version": PROTOCOL_VERSION
    }


def verify_call(envelope: dict) -> bool:
    """Verify a signed call envelope against its claimed identity."""
    try:
        public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(envelope["identity"]))
        public_key.verify(
            bytes.fromhex(envelope["signature"]),
            canonical(envelope["call"]).encode("utf-8")
        )
        return True
    except (_BadSignature, KeyError, TypeError, ValueError):
        return False


def authenticate(envelope: dict) -> str:
    """Return the verified caller identity, or raise InvalidSignature."""
    if not verify_call(envelope):
        raise InvalidSignature()
    return envelope["identity"].lower()


def _public_hex(private_key) -> str:
    return private_key.public_key().public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw
    ).hex()
