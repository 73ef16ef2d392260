"""AppKey — application Ed25519 signing key.

This module is a thin wrapper around the ``cryptography`` package's
Ed25519 primitives. It decodes the application key handed out by the
blindnet dashboard, signs token bytes with it, and exposes the matching
public key.

Accepted key forms
------------------
- 32 raw bytes: the Ed25519 seed.
- 64 raw bytes: a libsodium secret key (seed followed by the public key).
- Either of the above encoded as standard or URL-safe base64, given as
  ``str`` or ASCII ``bytes``.
"""
from __future__ import annotations

import base64
import binascii

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from blindnet.exceptions import ConfigurationError

SEED_LENGTH: int = 32
SODIUM_SECRET_KEY_LENGTH: int = 64


class AppKey:
    """Ed25519 application key: decode, sign, and expose the public half.

    Example
    -------
    ::

        key = AppKey.generate()
        same = AppKey.load(key.to_base64())
        signature = same.sign(b"hello world")
        assert verify_signature(key.public_bytes, signature, b"hello world")
    """

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def generate(cls) -> "AppKey":
        """Generate a fresh random application key."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def load(cls, app_key: bytes | str) -> "AppKey":
        """Decode *app_key* into an :class:`AppKey`.

        Parameters
        ----------
        app_key:
            Raw key bytes or their base64 text encoding (see module docs).

        Returns
        -------
        AppKey

        Raises
        ------
        ConfigurationError
            When the value cannot be decoded into valid Ed25519 key material.
        """
        raw = _decode_key_material(app_key)
        seed = raw[:SEED_LENGTH]
        try:
            private_key = Ed25519PrivateKey.from_private_bytes(seed)
        except ValueError as exc:
            raise ConfigurationError(f"application key is not an Ed25519 key: {exc}") from exc

        key = cls(private_key)
        if len(raw) == SODIUM_SECRET_KEY_LENGTH and raw[SEED_LENGTH:] != key.public_bytes:
            raise ConfigurationError(
                "application key public half does not match its private seed"
            )
        return key

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def sign(self, data: bytes) -> bytes:
        """Return the 64-byte Ed25519 signature of *data*."""
        return self._private_key.sign(data)

    @property
    def public_bytes(self) -> bytes:
        """The 32-byte raw public key."""
        return self._private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def to_base64(self) -> str:
        """Encode the key in the 64-byte libsodium layout as standard base64."""
        seed = self._private_key.private_bytes(
            Encoding.Raw, PrivateFormat.Raw, NoEncryption()
        )
        return base64.b64encode(seed + self.public_bytes).decode("ascii")

    def __repr__(self) -> str:
        return f"AppKey(public={base64.b64encode(self.public_bytes).decode('ascii')})"


def verify_signature(public_key_bytes: bytes, signature: bytes, data: bytes) -> bool:
    """Verify an Ed25519 signature.

    Parameters
    ----------
    public_key_bytes:
        The 32-byte raw public key.
    signature:
        The 64-byte signature to verify.
    data:
        The original signed data.

    Returns
    -------
    bool
        ``True`` if the signature is valid, ``False`` otherwise.

    Raises
    ------
    ValueError
        When *public_key_bytes* is not a 32-byte Ed25519 public key.
    """
    public_key = Ed25519PublicKey.from_public_bytes(public_key_bytes)
    try:
        public_key.verify(signature, data)
        return True
    except InvalidSignature:
        return False


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------


def _decode_key_material(app_key: bytes | str) -> bytes:
    """Turn raw or base64-encoded key input into raw key bytes."""
    if isinstance(app_key, (bytes, bytearray)):
        raw = bytes(app_key)
        if len(raw) in (SEED_LENGTH, SODIUM_SECRET_KEY_LENGTH):
            return raw
        try:
            text = raw.decode("ascii")
        except UnicodeDecodeError as exc:
            raise ConfigurationError(
                f"application key must be {SEED_LENGTH} or {SODIUM_SECRET_KEY_LENGTH} "
                f"raw bytes or base64 text, got {len(raw)} bytes"
            ) from exc
    elif isinstance(app_key, str):
        text = app_key
    else:
        raise ConfigurationError(
            f"application key must be bytes or str, got {type(app_key).__name__}"
        )

    decoded = _b64decode(text.strip())
    if len(decoded) not in (SEED_LENGTH, SODIUM_SECRET_KEY_LENGTH):
        raise ConfigurationError(
            f"decoded application key must be {SEED_LENGTH} or "
            f"{SODIUM_SECRET_KEY_LENGTH} bytes, got {len(decoded)}"
        )
    return decoded


def _b64decode(text: str) -> bytes:
    if not text:
        raise ConfigurationError("application key is empty")
    padded = text + "=" * (-len(text) % 4)
    altchars = b"-_" if ("-" in text or "_" in text) else None
    try:
        return base64.b64decode(padded, altchars=altchars, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError(f"application key is not valid base64: {exc}") from exc


__all__ = ["AppKey", "verify_signature", "SEED_LENGTH", "SODIUM_SECRET_KEY_LENGTH"]
