"""Slack sign-in strategy wired into a hosting application's callback lifecycle.

A strategy instance is meant to live for a single request: the scope
classification and the response adapter it builds are cached per instance.

Example:
    >>> strategy = SlackStrategy(config)
    >>> redirect = strategy.request_phase("https://app.example.com/login", state="xyz")
    >>> # ... user approves, Slack redirects back with ?code=...
    >>> auth = await strategy.callback_phase(code, "https://app.example.com/auth/slack/callback")
    >>> auth.uid
    'U123'
"""

from __future__ import annotations

import logging
from functools import cached_property
from urllib.parse import urlsplit, urlunsplit

from .adapters import TokenFactory, build_response_adapter
from .contracts import AccessToken, AuthenticationFailure, ProviderError, ResponseAdapter
from .models import DEFAULT_CALLBACK_PATH, AuthHash, SlackAuthConfigModel
from .normalizer import IdentityNormalizer
from .oauth2 import OAuth2Client
from .scopes import identity_scoped

logger = logging.getLogger(__name__)


class SlackStrategy:
    """Slack OAuth v2 strategy."""

    provider_name = "slack"

    def __init__(self, config: SlackAuthConfigModel, *, token_factory: TokenFactory | None = None):
        self.config = config
        self._token_factory = token_factory

    @cached_property
    def client(self) -> OAuth2Client:
        return OAuth2Client(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            site=self.config.site,
            authorize_url=self.config.authorize_url,
            token_url=self.config.token_url,
            timeout=self.config.timeout,
        )

    @cached_property
    def identity_scoped(self) -> bool:
        return identity_scoped(
            self.config.authorize_options, self.config.scope, self.config.user_scope
        )

    @property
    def skip_info(self) -> bool:
        return self.config.skip_info

    def authorize_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for option in self.config.authorize_options:
            value = getattr(self.config, option)
            if value:
                params[option] = value
        return params

    def callback_url(self, request_url: str, script_name: str = "") -> str:
        parts = urlsplit(request_url)
        path = self.config.callback_path or DEFAULT_CALLBACK_PATH
        return urlunsplit((parts.scheme, parts.netloc, f"{script_name}{path}", "", ""))

    def request_phase(self, request_url: str, *, state: str, script_name: str = "") -> str:
        """Return the Slack authorize URL the user-agent should be redirected to."""
        params = self.authorize_params()
        params["redirect_uri"] = self.callback_url(request_url, script_name)
        params["state"] = state
        return self.client.authorize_url_for(params)

    def response_adapter(self, access_token: AccessToken) -> ResponseAdapter:
        return build_response_adapter(
            access_token,
            identity_scoped=self.identity_scoped,
            token_factory=self._token_factory,
        )

    def normalizer(self, access_token: AccessToken) -> IdentityNormalizer:
        return IdentityNormalizer(
            access_token,
            self.response_adapter(access_token),
            identity_scoped=self.identity_scoped,
            skip_info=self.skip_info,
        )

    async def auth_hash(self, access_token: AccessToken) -> AuthHash:
        return await self.normalizer(access_token).auth_hash()

    async def callback_phase(
        self, code: str, request_url: str, *, script_name: str = ""
    ) -> AuthHash:
        """Exchange the authorization code and normalize the resulting identity.

        Raises:
            AuthenticationFailure: token exchange, profile fetch, or uid resolution failed.
        """
        redirect_uri = self.callback_url(request_url, script_name)
        try:
            access_token = await self.client.get_token(code=code, redirect_uri=redirect_uri)
            auth = await self.auth_hash(access_token)
        except ProviderError as exc:
            logger.warning(
                "Slack authentication failed",
                extra={
                    "provider": self.provider_name,
                    "provider_error": exc.error,
                    "status_code": exc.status_code,
                },
            )
            raise AuthenticationFailure(
                exc.error, exc.description, status_code=exc.status_code
            ) from exc

        logger.info(
            "Slack authentication succeeded",
            extra={"provider": self.provider_name, "identity_scoped": self.identity_scoped},
        )
        return auth
