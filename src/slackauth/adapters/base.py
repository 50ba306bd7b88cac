"""Behavior shared by both Slack response adapters."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import cached_property
from typing import Any

from ..contracts import AccessToken, ProviderError, ProviderResponse
from ..oauth2 import OAuth2AccessToken

logger = logging.getLogger(__name__)

TokenFactory = Callable[[Any, Mapping[str, Any]], AccessToken]


def derive_identity_access_token(
    access_token: AccessToken,
    token_factory: TokenFactory = OAuth2AccessToken.from_hash,
) -> AccessToken:
    """Build the authorizing user's token from the `authed_user` response field."""
    authed_user = access_token.params.get("authed_user")
    if not isinstance(authed_user, Mapping) or not authed_user.get("access_token"):
        raise ProviderError(
            "invalid_token", "Slack token response missing authed_user token", status_code=400
        )
    return token_factory(access_token.client, authed_user)


def json_body(response: ProviderResponse, *, endpoint: str) -> dict[str, Any]:
    """Decoded object body of a Slack Web API call, or {} when unusable."""
    payload = response.parsed
    if not isinstance(payload, dict):
        logger.warning(
            "Slack endpoint returned non-object JSON",
            extra={"provider": "slack", "endpoint": endpoint, "status_code": response.status_code},
        )
        return {}
    if payload.get("ok") is False:
        logger.warning(
            "Slack endpoint returned API error",
            extra={
                "provider": "slack",
                "endpoint": endpoint,
                "status_code": response.status_code,
                "provider_error": payload.get("error"),
            },
        )
        return {}
    return payload


class BaseResponseAdapter:
    """Holds the primary token and lazily derives the identity token."""

    def __init__(self, access_token: AccessToken, token_factory: TokenFactory | None = None):
        self.access_token = access_token
        self._token_factory = token_factory or OAuth2AccessToken.from_hash

    @cached_property
    def identity_access_token(self) -> AccessToken:
        return derive_identity_access_token(self.access_token, self._token_factory)

    async def raw_info(self) -> dict[str, Any]:
        raise NotImplementedError
