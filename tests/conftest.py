"""Shared fixtures: a generated application key and a scripted HTTP session."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest
import requests

from blindnet.keys import AppKey


@dataclass
class RecordedRequest:
    url: str
    headers: dict[str, str]
    timeout: float


@dataclass
class FakeResponse:
    status_code: int


@dataclass
class FakeSession:
    """Stands in for requests.Session, answering DELETEs from a script.

    Each scripted item is either a status code or an exception to raise.
    """

    script: list[object] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)
    opened: int = 0
    closed: int = 0

    def __enter__(self) -> "FakeSession":
        self.opened += 1
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed += 1

    def delete(self, url: str, headers: dict[str, str], timeout: float) -> FakeResponse:
        self.requests.append(RecordedRequest(url=url, headers=dict(headers), timeout=timeout))
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return FakeResponse(status_code=int(item))


@pytest.fixture()
def app_key() -> AppKey:
    return AppKey.generate()


@pytest.fixture()
def encoded_key(app_key: AppKey) -> str:
    return app_key.to_base64()


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")


@pytest.fixture()
def session_type() -> type[FakeSession]:
    return FakeSession
