"""Tests for blindnet.config — ClientConfig validation and defaults."""
from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from blindnet.config import (
    CLIENT_TOKEN_TTL,
    DEFAULT_API_ENDPOINT,
    DEFAULT_REQUEST_TIMEOUT,
    TEMP_USER_TOKEN_TTL,
    USER_TOKEN_TTL,
    ClientConfig,
)


class TestDefaults:
    def test_default_endpoint(self) -> None:
        assert ClientConfig(app_id="app").api_endpoint == DEFAULT_API_ENDPOINT == "https://api.blindnet.io"

    def test_default_timeout(self) -> None:
        assert ClientConfig(app_id="app").request_timeout == DEFAULT_REQUEST_TIMEOUT

    def test_default_lifetimes(self) -> None:
        config = ClientConfig(app_id="app")
        assert config.client_token_ttl == CLIENT_TOKEN_TTL == datetime.timedelta(hours=24)
        assert config.temp_user_token_ttl == TEMP_USER_TOKEN_TTL == datetime.timedelta(minutes=30)
        assert config.user_token_ttl == USER_TOKEN_TTL == datetime.timedelta(hours=12)


class TestValidation:
    def test_trailing_slash_stripped(self) -> None:
        config = ClientConfig(app_id="app", api_endpoint="https://example.com/api/")
        assert config.api_endpoint == "https://example.com/api"

    def test_empty_app_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(app_id="")

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(app_id="app", request_timeout=-1)

    def test_zero_ttl_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(app_id="app", user_token_ttl=datetime.timedelta(0))

    def test_non_http_endpoint_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(app_id="app", api_endpoint="api.blindnet.io")


class TestImmutability:
    def test_config_is_frozen(self) -> None:
        config = ClientConfig(app_id="app")
        with pytest.raises(ValidationError):
            config.app_id = "other"  # type: ignore[misc]
