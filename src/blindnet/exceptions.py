"""Exception hierarchy for the blindnet SDK.

Every error raised by this package derives from :class:`BlindnetError`, so
callers can catch the whole family with a single ``except`` clause while
still being able to distinguish configuration problems from remote-service
failures.
"""
from __future__ import annotations


class BlindnetError(Exception):
    """Base class for all blindnet SDK errors."""


class ConfigurationError(BlindnetError):
    """Raised when the client is constructed with invalid settings.

    The most common cause is an application key that cannot be decoded
    into Ed25519 signing key material.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid blindnet configuration: {reason}")


class TokenSigningError(BlindnetError):
    """Raised when the Ed25519 signing primitive fails."""

    def __init__(self, token_type: str) -> None:
        self.token_type = token_type
        super().__init__(f"Could not sign '{token_type}' token")


class TokenFormatError(BlindnetError, ValueError):
    """Raised when a token string is structurally invalid."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid token: {reason}")


class AuthenticationError(BlindnetError):
    """Raised when blindnet rejects the client credential twice in a row."""

    def __init__(self, url: str = "") -> None:
        self.url = url
        super().__init__(
            "Failed authentication to blindnet. Make sure you are using the "
            "correct application key and application id."
        )


class ServiceError(BlindnetError):
    """Raised when a blindnet API call does not succeed.

    Parameters
    ----------
    context:
        Human-readable description of the failed operation.
    status_code:
        HTTP status returned by the API, or ``None`` when no response was
        received (connection failure, timeout).
    url:
        The request URL.
    """

    def __init__(self, context: str, status_code: int | None, url: str = "") -> None:
        self.context = context
        self.status_code = status_code
        self.url = url
        if status_code is None:
            message = f"{context}. No response received from the API"
        else:
            message = f"{context}. API response code was {status_code}"
        super().__init__(message)


__all__ = [
    "AuthenticationError",
    "BlindnetError",
    "ConfigurationError",
    "ServiceError",
    "TokenFormatError",
    "TokenSigningError",
]
