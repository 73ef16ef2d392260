"""TokenClient — blindnet token issuance and data lifecycle operations.

The client owns one application key and one cached client credential. The
credential authorizes the lifecycle endpoints; it is minted at construction
and refreshed once, transparently, whenever blindnet answers ``401``.

Request lifecycle
-----------------
Every lifecycle call is a two-attempt state machine::

    FIRST  --200-->  SUCCESS
    FIRST  --401-->  refresh credential, SECOND
    SECOND --200-->  SUCCESS
    SECOND --401-->  FAILED_AUTH   (AuthenticationError)
    any    --other-> FAILED        (ServiceError)

Each attempt produces an :class:`AttemptOutcome`; the operation raises only
once a terminal state is reached.
"""
from __future__ import annotations

import datetime
import logging
import threading
import urllib.parse
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Callable, Optional

import requests
from pydantic import ValidationError

from blindnet.config import (
    CLIENT_TOKEN_TTL,
    DEFAULT_API_ENDPOINT,
    DEFAULT_REQUEST_TIMEOUT,
    TEMP_USER_TOKEN_TTL,
    USER_TOKEN_TTL,
    ClientConfig,
)
from blindnet.exceptions import AuthenticationError, ConfigurationError, ServiceError
from blindnet.keys import AppKey
from blindnet.tokens import TokenMinter

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


class Attempt(str, Enum):
    """Which send of a request is in flight."""

    FIRST = "first"
    SECOND = "second"


class RequestState(str, Enum):
    """State reached after one attempt of a lifecycle request."""

    SUCCESS = "success"
    RETRY = "retry"
    FAILED_AUTH = "failed_auth"
    FAILED = "failed"


@dataclass(frozen=True)
class AttemptOutcome:
    """Tagged result of a single HTTP attempt.

    Parameters
    ----------
    state:
        The state the request machine moves to.
    status_code:
        HTTP status of the response, or None if no response arrived.
    error:
        The transport exception when no response arrived.
    """

    state: RequestState
    status_code: Optional[int] = None
    error: Optional[requests.RequestException] = None


def classify_response(status_code: int, attempt: Attempt) -> AttemptOutcome:
    """Map an HTTP status code on a given attempt to the next request state."""
    if status_code == HTTPStatus.OK:
        return AttemptOutcome(RequestState.SUCCESS, status_code)
    if status_code == HTTPStatus.UNAUTHORIZED:
        if attempt is Attempt.FIRST:
            return AttemptOutcome(RequestState.RETRY, status_code)
        return AttemptOutcome(RequestState.FAILED_AUTH, status_code)
    return AttemptOutcome(RequestState.FAILED, status_code)


class TokenClient:
    """Issues blindnet tokens and calls the blindnet lifecycle API.

    Parameters
    ----------
    app_key:
        Application Ed25519 private key, raw or base64 encoded.
    app_id:
        Application ID.
    api_endpoint:
        blindnet API base URL.
    request_timeout:
        Seconds to wait for each HTTP attempt.
    client_token_ttl, temp_user_token_ttl, user_token_ttl:
        Lifetimes of the three token kinds.
    session_factory:
        Callable returning a fresh :class:`requests.Session`. One session is
        opened per lifecycle call and closed when the call returns or raises.

    Raises
    ------
    ConfigurationError
        When the key cannot be decoded or a setting is invalid.

    Example
    -------
    ::

        client = TokenClient.init(app_key, "my-app-id")
        token = client.create_user_token("user-1", "group-1")
        client.forget_user("user-1")
    """

    def __init__(
        self,
        app_key: bytes | str,
        app_id: str,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client_token_ttl: datetime.timedelta = CLIENT_TOKEN_TTL,
        temp_user_token_ttl: datetime.timedelta = TEMP_USER_TOKEN_TTL,
        user_token_ttl: datetime.timedelta = USER_TOKEN_TTL,
        session_factory: SessionFactory = requests.Session,
    ) -> None:
        try:
            config = ClientConfig(
                app_id=app_id,
                api_endpoint=api_endpoint,
                request_timeout=request_timeout,
                client_token_ttl=client_token_ttl,
                temp_user_token_ttl=temp_user_token_ttl,
                user_token_ttl=user_token_ttl,
            )
        except ValidationError as exc:
            raise ConfigurationError(_describe_validation_error(exc)) from exc

        self._config = config
        self._app_key = AppKey.load(app_key)
        self._minter = TokenMinter(self._app_key, config.app_id)
        self._session_factory = session_factory
        self._lock = threading.Lock()
        self._client_token = ""

        self.refresh_client_token()
        logger.info(
            "blindnet client created for app %s against %s",
            config.app_id,
            config.api_endpoint,
        )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def init(
        cls,
        app_key: bytes | str,
        app_id: str,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
    ) -> "TokenClient":
        """Create a client with default timeout and token lifetimes."""
        return cls(app_key, app_id, api_endpoint)

    @classmethod
    def from_config(
        cls,
        app_key: bytes | str,
        config: ClientConfig,
        session_factory: SessionFactory = requests.Session,
    ) -> "TokenClient":
        """Create a client from a prebuilt :class:`ClientConfig`."""
        return cls(
            app_key,
            config.app_id,
            config.api_endpoint,
            request_timeout=config.request_timeout,
            client_token_ttl=config.client_token_ttl,
            temp_user_token_ttl=config.temp_user_token_ttl,
            user_token_ttl=config.user_token_ttl,
            session_factory=session_factory,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def public_key(self) -> bytes:
        """Raw 32-byte Ed25519 public key matching the application key."""
        return self._app_key.public_bytes

    @property
    def client_token(self) -> str:
        """The currently cached client credential."""
        with self._lock:
            return self._client_token

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def create_temp_user_token(self, group_id: str) -> str:
        """Create a token for a non-registered user, usually a data sender.

        Parameters
        ----------
        group_id:
            ID of the group the data sender is sending data to.

        Returns
        -------
        str
            A signed ``tjwt`` token.
        """
        return self._minter.temp_user_token(group_id, self._config.temp_user_token_ttl)

    def create_user_token(self, user_id: str, group_id: str) -> str:
        """Create a token for a registered user, usually a data receiver.

        Parameters
        ----------
        user_id:
            ID of the registered user.
        group_id:
            ID of the group the user belongs to.

        Returns
        -------
        str
            A signed ``jwt`` token.
        """
        return self._minter.user_token(user_id, group_id, self._config.user_token_ttl)

    def refresh_client_token(self) -> None:
        """Mint a new client credential and replace the cached one."""
        token = self._minter.client_token(self._config.client_token_ttl)
        with self._lock:
            self._client_token = token
        logger.debug("Client credential refreshed for app %s", self._config.app_id)

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    def forget_data(self, data_id: str) -> bool:
        """Delete the encrypted data key of one piece of data.

        Raises
        ------
        AuthenticationError
            When blindnet rejects the credential before and after a refresh.
        ServiceError
            When blindnet answers with any other non-200 status.
        ValueError
            When *data_id* is empty.
        """
        return self._delete(
            f"/api/v1/documents/{_segment('data_id', data_id)}",
            f"Error while forgetting the data with id {data_id}",
        )

    def revoke_access(self, user_id: str) -> bool:
        """Delete all encrypted data keys of a user."""
        return self._delete(
            f"/api/v1/documents/user/{_segment('user_id', user_id)}",
            f"Error while revoking access to user with id {user_id}",
        )

    def forget_user(self, user_id: str) -> bool:
        """Delete a user from blindnet."""
        return self._delete(
            f"/api/v1/users/{_segment('user_id', user_id)}",
            f"Error while forgetting the user with id {user_id}",
        )

    def forget_group(self, group_id: str) -> bool:
        """Delete a group, every user in it, and all their encrypted data keys."""
        return self._delete(
            f"/api/v1/group/{_segment('group_id', group_id)}",
            f"Error while forgetting the group with id {group_id}",
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _delete(self, path: str, context: str) -> bool:
        url = f"{self._config.api_endpoint}{path}"
        with self._session_factory() as session:
            outcome = self._attempt(session, url, Attempt.FIRST)
            if outcome.state is RequestState.RETRY:
                logger.info("blindnet answered 401 for %s; refreshing client credential", url)
                self.refresh_client_token()
                outcome = self._attempt(session, url, Attempt.SECOND)

        if outcome.state is RequestState.SUCCESS:
            return True
        if outcome.state is RequestState.FAILED_AUTH:
            logger.warning("blindnet rejected the refreshed client credential for %s", url)
            raise AuthenticationError(url)
        if outcome.error is not None:
            raise ServiceError(context, None, url) from outcome.error
        raise ServiceError(context, outcome.status_code, url)

    def _attempt(self, session: requests.Session, url: str, attempt: Attempt) -> AttemptOutcome:
        headers = {
            "Authorization": f"Bearer {self.client_token}",
            "Content-Type": "application/json",
        }
        logger.debug("DELETE %s (%s attempt)", url, attempt.value)
        try:
            response = session.delete(url, headers=headers, timeout=self._config.request_timeout)
        except requests.RequestException as exc:
            logger.debug("DELETE %s failed: %s", url, exc)
            return AttemptOutcome(RequestState.FAILED, error=exc)
        return classify_response(response.status_code, attempt)


Blindnet = TokenClient


def _segment(name: str, value: str) -> str:
    """Percent-encode *value* as a single, non-empty URL path segment."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")
    return urllib.parse.quote(value, safe="")


def _describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


__all__ = [
    "Attempt",
    "AttemptOutcome",
    "Blindnet",
    "RequestState",
    "TokenClient",
    "classify_response",
]
