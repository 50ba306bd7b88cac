"""Thin OAuth2 client for the Slack Web API.

The normalizer only needs an object that can issue authenticated GETs and
expose token metadata; this module provides the real httpx-backed version of
that capability, plus the authorization-code exchange.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ConfigDict, ValidationError

from .contracts import ProviderError
from .models import SlackBaseModel

logger = logging.getLogger(__name__)

# Keys consumed by the token itself; everything else lands in `params`.
_TOKEN_KEYS = frozenset({"access_token", "token", "refresh_token", "expires_in", "expires_at"})


def create_http_client(timeout: float = 30.0) -> httpx.AsyncClient:
    """Create the async HTTP client used for every Slack call."""
    return httpx.AsyncClient(follow_redirects=True, timeout=httpx.Timeout(timeout))


class _SlackTokenResponse(SlackBaseModel):
    """Minimal `oauth.v2.access` response (successful or error)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ok: bool | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: float | None = None
    authed_user: dict[str, Any] | None = None

    error: str | None = None

    @property
    def has_any_token(self) -> bool:
        if self.access_token:
            return True
        return bool(self.authed_user and self.authed_user.get("access_token"))


class OAuth2Response:
    """Decoded response of an authenticated Slack call."""

    def __init__(self, response: Any):
        self.response = response
        self.status_code: int = response.status_code

    @property
    def parsed(self) -> Any:
        try:
            return self.response.json()
        except ValueError:
            return None


class OAuth2Client:
    """Client credentials and endpoint layout for one Slack app."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        site: str,
        authorize_url: str,
        token_url: str,
        timeout: float = 30.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.site = site.rstrip("/")
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.site}/{path.lstrip('/')}"

    def authorize_url_for(self, params: Mapping[str, str]) -> str:
        query: list[tuple[str, str]] = [
            ("client_id", self.client_id),
            ("response_type", "code"),
        ]
        query.extend(params.items())
        return f"{self.url_for(self.authorize_url)}?{urlencode(query)}"

    async def get_token(self, *, code: str, redirect_uri: str) -> OAuth2AccessToken:
        """Exchange an authorization code for a Slack access token."""
        payload = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        }
        try:
            async with create_http_client(self.timeout) as client:
                resp = await client.post(
                    self.url_for(self.token_url),
                    data=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "Slack token endpoint unreachable",
                extra={"provider": "slack", "endpoint": "token", "error": type(exc).__name__},
            )
            raise ProviderError(
                "temporarily_unavailable", "Slack token request failed", status_code=503
            ) from exc

        data = self._parse_token_response(resp)
        return OAuth2AccessToken.from_hash(self, data)

    def _parse_token_response(self, resp: Any) -> dict[str, Any]:
        if not 200 <= resp.status_code < 300:
            logger.warning(
                "Slack token endpoint returned non-2xx",
                extra={"provider": "slack", "endpoint": "token", "status_code": resp.status_code},
            )
            raise ProviderError(
                "invalid_grant", "Slack token request failed", status_code=resp.status_code
            )

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning(
                "Slack token endpoint returned invalid JSON",
                extra={"provider": "slack", "endpoint": "token", "status_code": resp.status_code},
            )
            raise ProviderError(
                "invalid_grant", "Invalid token response payload", status_code=resp.status_code
            ) from exc

        if not isinstance(data, dict):
            raise ProviderError(
                "invalid_grant", "Invalid token response payload", status_code=resp.status_code
            )

        try:
            token = _SlackTokenResponse.model_validate(data)
        except ValidationError as exc:
            raise ProviderError(
                "invalid_grant", "Invalid token response payload", status_code=resp.status_code
            ) from exc

        if token.ok is False or token.error is not None:
            logger.warning(
                "Slack token endpoint returned OAuth error",
                extra={
                    "provider": "slack",
                    "endpoint": "token",
                    "status_code": resp.status_code,
                    "provider_error": token.error,
                },
            )
            raise ProviderError(
                token.error or "invalid_grant",
                "Slack token request failed",
                status_code=resp.status_code,
            )

        if not token.has_any_token:
            raise ProviderError("invalid_grant", "No access_token in response", status_code=400)

        return data


class OAuth2AccessToken:
    """Bearer token bound to an `OAuth2Client`."""

    def __init__(
        self,
        client: OAuth2Client,
        token: str | None,
        *,
        refresh_token: str | None = None,
        expires_at: int | None = None,
        expires_in: float | None = None,
        params: Mapping[str, Any] | None = None,
    ):
        self.client = client
        self.token = token
        self.refresh_token = refresh_token
        if expires_at is None and expires_in is not None:
            expires_at = int(time.time()) + int(expires_in)
        self.expires_at = int(expires_at) if expires_at is not None else None
        self.params: dict[str, Any] = dict(params or {})

    @classmethod
    def from_hash(cls, client: OAuth2Client, data: Mapping[str, Any]) -> OAuth2AccessToken:
        return cls(
            client,
            data.get("access_token") or data.get("token"),
            refresh_token=data.get("refresh_token"),
            expires_at=data.get("expires_at"),
            expires_in=data.get("expires_in"),
            params={key: value for key, value in data.items() if key not in _TOKEN_KEYS},
        )

    @property
    def expires(self) -> bool:
        return self.expires_at is not None

    async def get(self, path: str) -> OAuth2Response:
        return await self.request("GET", path)

    async def post(self, path: str, data: Mapping[str, Any] | None = None) -> OAuth2Response:
        return await self.request("POST", path, data=data)

    async def request(
        self, method: str, path: str, *, data: Mapping[str, Any] | None = None
    ) -> OAuth2Response:
        endpoint = path.split("?", 1)[0]
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            async with create_http_client(self.client.timeout) as client:
                resp = await client.request(
                    method, self.client.url_for(path), headers=headers, data=data
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "Slack API unreachable",
                extra={"provider": "slack", "endpoint": endpoint, "error": type(exc).__name__},
            )
            raise ProviderError(
                "temporarily_unavailable", "Slack API request failed", status_code=503
            ) from exc

        if not 200 <= resp.status_code < 300:
            logger.warning(
                "Slack API returned non-2xx",
                extra={"provider": "slack", "endpoint": endpoint, "status_code": resp.status_code},
            )
            raise ProviderError(
                "invalid_token", "Slack API request failed", status_code=resp.status_code
            )
        return OAuth2Response(resp)
