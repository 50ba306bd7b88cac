"""Contracts and shared types for the Slack sign-in stack."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


class ProviderError(Exception):
    """Standardized provider error with HTTP-style status information."""

    def __init__(self, error: str, description: str | None = None, status_code: int = 400):
        super().__init__(description or error)
        self.error = error
        self.description = description
        self.status_code = status_code


class MissingFieldError(ProviderError):
    """A required key path was absent from a decoded provider response."""

    def __init__(self, field: str, status_code: int = 400):
        super().__init__("invalid_token", f"Slack profile missing {field}", status_code=status_code)
        self.field = field


class AuthenticationFailure(ProviderError):
    """The callback could not produce an identity; render this to the end user."""


@runtime_checkable
class ProviderResponse(Protocol):
    """Decoded response from an authenticated provider call."""

    status_code: int

    @property
    def parsed(self) -> Any:
        """Decoded JSON body, or None when the body was not JSON."""


@runtime_checkable
class AccessToken(Protocol):
    """Capability for authenticated calls against the Slack Web API."""

    token: str | None
    expires_at: int | None
    refresh_token: str | None
    params: Mapping[str, Any]
    client: Any

    @property
    def expires(self) -> bool:
        """Whether the token carries an expiry."""

    async def get(self, path: str) -> ProviderResponse:
        """Issue an authenticated GET against `path` on the provider site."""


@runtime_checkable
class ResponseAdapter(Protocol):
    """Knows how to fetch and interpret one shape of Slack profile payload."""

    access_token: AccessToken

    @property
    def identity_access_token(self) -> AccessToken:
        """Token for the authorizing user, derived from `authed_user`."""

    async def raw_info(self) -> dict[str, Any]:
        """Fetch the raw profile payload for this response shape."""


__all__ = [
    "AccessToken",
    "AuthenticationFailure",
    "MissingFieldError",
    "ProviderError",
    "ProviderResponse",
    "ResponseAdapter",
]
