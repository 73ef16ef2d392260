"""Token minting for blindnet — Ed25519 signed, expiring, claim-bearing tokens.

Token format
------------
The token is a dot-separated string:
    base64url(header).base64url(payload).base64url(signature)

- header: ``{"typ": <kind>, "alg": "EdDSA"}``
- payload: the claim set for the token kind plus ``"exp"`` (Unix seconds)
- signature: Ed25519(header.payload, application key)

All three segments are unpadded base64url, so the token is a standard JWS
compact serialization that blindnet verifies with the application's
public key.

Token kinds
-----------
=================  =====  ==========================
Kind               typ    Claims
=================  =====  ==========================
Client credential  cjwt   app, tid, exp
Temporary user     tjwt   app, tid, gid, exp
Registered user    jwt    uid, app, gid, exp
=================  =====  ==========================
"""
from __future__ import annotations

import base64
import binascii
import datetime
import json
import logging
import uuid
from dataclasses import dataclass
from enum import Enum

from blindnet.exceptions import TokenFormatError, TokenSigningError
from blindnet.keys import AppKey, verify_signature

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM: str = "EdDSA"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class TokenType(str, Enum):
    """Value of the ``typ`` header for each token kind."""

    CLIENT = "cjwt"
    TEMP_USER = "tjwt"
    USER = "jwt"


# ---------------------------------------------------------------------------
# TokenMinter
# ---------------------------------------------------------------------------


class TokenMinter:
    """Builds and signs tokens for one application.

    Parameters
    ----------
    app_key:
        The decoded application signing key.
    app_id:
        The application ID carried in the ``app`` claim.
    """

    def __init__(self, app_key: AppKey, app_id: str) -> None:
        self._app_key = app_key
        self._app_id = app_id

    def client_token(self, ttl: datetime.timedelta) -> str:
        """Mint a client credential (``cjwt``) with a fresh token id."""
        claims: dict[str, object] = {
            "app": self._app_id,
            "tid": _new_token_id(),
        }
        return self._mint(TokenType.CLIENT, claims, ttl)

    def temp_user_token(self, group_id: str, ttl: datetime.timedelta) -> str:
        """Mint a temporary-user token (``tjwt``) for *group_id*."""
        _require_id("group_id", group_id)
        claims: dict[str, object] = {
            "app": self._app_id,
            "tid": _new_token_id(),
            "gid": group_id,
        }
        return self._mint(TokenType.TEMP_USER, claims, ttl)

    def user_token(self, user_id: str, group_id: str, ttl: datetime.timedelta) -> str:
        """Mint a registered-user token (``jwt``) for *user_id* in *group_id*."""
        _require_id("user_id", user_id)
        _require_id("group_id", group_id)
        claims: dict[str, object] = {
            "uid": user_id,
            "app": self._app_id,
            "gid": group_id,
        }
        return self._mint(TokenType.USER, claims, ttl)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _mint(
        self,
        token_type: TokenType,
        claims: dict[str, object],
        ttl: datetime.timedelta,
    ) -> str:
        claims["exp"] = int((_utcnow() + ttl).timestamp())
        header = {"typ": token_type.value, "alg": SIGNING_ALGORITHM}

        signing_input = f"{_encode_json(header)}.{_encode_json(claims)}"
        try:
            signature = self._app_key.sign(signing_input.encode("utf-8"))
        except Exception as exc:
            raise TokenSigningError(token_type.value) from exc

        logger.debug("Minted %s token expiring at %d", token_type.value, claims["exp"])
        return f"{signing_input}.{_b64url_encode(signature)}"


# ---------------------------------------------------------------------------
# Decoding and verification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DecodedToken:
    """The three parts of a token, decoded but not verified.

    Parameters
    ----------
    header:
        The decoded header map (``typ`` and ``alg``).
    claims:
        The decoded payload map.
    signature:
        The raw signature bytes.
    signing_input:
        ``segment1 + "." + segment2`` exactly as it was signed.
    """

    header: dict[str, object]
    claims: dict[str, object]
    signature: bytes
    signing_input: str

    @property
    def token_type(self) -> TokenType:
        """The token kind named by the ``typ`` header."""
        try:
            return TokenType(self.header.get("typ"))
        except ValueError as exc:
            raise TokenFormatError(f"unknown token type {self.header.get('typ')!r}") from exc

    @property
    def expires_at(self) -> datetime.datetime:
        """The ``exp`` claim as an aware UTC datetime."""
        try:
            exp = int(self.claims["exp"])  # type: ignore[call-overload]
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenFormatError("missing or invalid exp claim") from exc
        return datetime.datetime.fromtimestamp(exp, datetime.timezone.utc)


def decode_token(token: str) -> DecodedToken:
    """Split and decode *token* without checking its signature.

    Raises
    ------
    TokenFormatError
        When the token does not consist of three decodable segments.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise TokenFormatError(f"Expected 3 dot-separated parts, got {len(parts)}")

    header_b64, payload_b64, signature_b64 = parts
    header = _decode_json(header_b64, "header")
    claims = _decode_json(payload_b64, "payload")
    try:
        signature = _b64url_decode(signature_b64)
    except (binascii.Error, ValueError) as exc:
        raise TokenFormatError(f"Could not decode signature: {exc}") from exc

    return DecodedToken(
        header=header,
        claims=claims,
        signature=signature,
        signing_input=f"{header_b64}.{payload_b64}",
    )


def verify_token(token: str, public_key: bytes) -> bool:
    """Return True if *token* carries a valid Ed25519 signature under *public_key*.

    Expiry is not checked; blindnet performs that check when the token is
    presented.

    Raises
    ------
    TokenFormatError
        When the token is malformed.
    ValueError
        When *public_key* is not a 32-byte Ed25519 public key.
    """
    decoded = decode_token(token)
    return verify_signature(public_key, decoded.signature, decoded.signing_input.encode("utf-8"))


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


def _new_token_id() -> str:
    return str(uuid.uuid4())


def _require_id(name: str, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")


def _encode_json(data: dict[str, object]) -> str:
    return _b64url_encode(json.dumps(data, separators=(",", ":")).encode("utf-8"))


def _decode_json(segment: str, name: str) -> dict[str, object]:
    try:
        decoded = json.loads(_b64url_decode(segment).decode("utf-8"))
    except (binascii.Error, ValueError) as exc:
        raise TokenFormatError(f"Could not decode {name}: {exc}") from exc
    if not isinstance(decoded, dict):
        raise TokenFormatError(f"{name} is not a JSON object")
    return decoded


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    return base64.b64decode(segment + "=" * (-len(segment) % 4), altchars=b"-_", validate=True)


__all__ = [
    "DecodedToken",
    "SIGNING_ALGORITHM",
    "TokenMinter",
    "TokenType",
    "decode_token",
    "verify_token",
]
