"""Client configuration and default constants."""
from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_ENDPOINT: str = "https://api.blindnet.io"
DEFAULT_REQUEST_TIMEOUT: float = 10.0

CLIENT_TOKEN_TTL: datetime.timedelta = datetime.timedelta(hours=24)
TEMP_USER_TOKEN_TTL: datetime.timedelta = datetime.timedelta(minutes=30)
# Registered-user tokens live 12 hours; see DESIGN.md for the 30-minute variant.
USER_TOKEN_TTL: datetime.timedelta = datetime.timedelta(hours=12)


class ClientConfig(BaseModel):
    """Immutable settings owned by a single :class:`~blindnet.client.TokenClient`.

    The signing key is deliberately not part of this model; it is decoded
    once by the client and never serialized.
    """

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(min_length=1)
    api_endpoint: str = DEFAULT_API_ENDPOINT
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    client_token_ttl: datetime.timedelta = CLIENT_TOKEN_TTL
    temp_user_token_ttl: datetime.timedelta = TEMP_USER_TOKEN_TTL
    user_token_ttl: datetime.timedelta = USER_TOKEN_TTL

    @field_validator("api_endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("api_endpoint must be an http(s) URL")
        return value

    @field_validator("client_token_ttl", "temp_user_token_ttl", "user_token_ttl")
    @classmethod
    def _positive_ttl(cls, value: datetime.timedelta) -> datetime.timedelta:
        if value <= datetime.timedelta(0):
            raise ValueError("token lifetime must be positive")
        return value


__all__ = [
    "CLIENT_TOKEN_TTL",
    "ClientConfig",
    "DEFAULT_API_ENDPOINT",
    "DEFAULT_REQUEST_TIMEOUT",
    "TEMP_USER_TOKEN_TTL",
    "USER_TOKEN_TTL",
]
