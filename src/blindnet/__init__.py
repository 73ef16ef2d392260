"""blindnet — server-side SDK for the blindnet data-protection service.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick start
-----------
::

    from blindnet import TokenClient

    client = TokenClient.init(app_key="<base64 Ed25519 key>", app_id="<app id>")

    # Tokens for your users
    sender_token = client.create_temp_user_token("group-1")
    receiver_token = client.create_user_token("user-1", "group-1")

    # Data lifecycle
    client.forget_data("data-1")
    client.revoke_access("user-1")
    client.forget_user("user-1")
    client.forget_group("group-1")
"""
from __future__ import annotations

__version__: str = "0.1.0"

from blindnet.client import Blindnet, TokenClient
from blindnet.config import (
    CLIENT_TOKEN_TTL,
    DEFAULT_API_ENDPOINT,
    DEFAULT_REQUEST_TIMEOUT,
    TEMP_USER_TOKEN_TTL,
    USER_TOKEN_TTL,
    ClientConfig,
)
from blindnet.exceptions import (
    AuthenticationError,
    BlindnetError,
    ConfigurationError,
    ServiceError,
    TokenFormatError,
    TokenSigningError,
)
from blindnet.keys import AppKey, verify_signature
from blindnet.tokens import DecodedToken, TokenType, decode_token, verify_token

__all__ = [
    "__version__",
    # client
    "Blindnet",
    "TokenClient",
    # config
    "CLIENT_TOKEN_TTL",
    "ClientConfig",
    "DEFAULT_API_ENDPOINT",
    "DEFAULT_REQUEST_TIMEOUT",
    "TEMP_USER_TOKEN_TTL",
    "USER_TOKEN_TTL",
    # errors
    "AuthenticationError",
    "BlindnetError",
    "ConfigurationError",
    "ServiceError",
    "TokenFormatError",
    "TokenSigningError",
    # keys and tokens
    "AppKey",
    "DecodedToken",
    "TokenType",
    "decode_token",
    "verify_signature",
    "verify_token",
]
