"""Pydantic models for Slack sign-in.

These types cover strategy configuration and the normalized identity record
handed back to the hosting application.

## Security-relevant configuration fields

- `scope` / `user_scope`: affect what permissions are requested from Slack, and
  `user_scope` decides whether the legacy identity flow is used.
- `callback_path`: controls which HTTP route receives Slack callbacks.

Treat changes to these fields as security-sensitive and ensure they are covered by
tests and documented behavior.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SLACK_SITE = "https://slack.com"
SLACK_AUTHORIZE_URL = "/oauth/v2/authorize"
SLACK_TOKEN_URL = "/api/oauth.v2.access"
DEFAULT_CALLBACK_PATH = "/auth/slack/callback"

AuthorizeOption = Literal["scope", "user_scope", "team"]


class SlackBaseModel(BaseModel):
    """Base model for all slackauth models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class SlackAuthConfigModel(SlackBaseModel):
    """Slack OAuth provider configuration."""

    client_id: str
    client_secret: str
    scope: str | None = None
    user_scope: str | None = None
    team: str | None = None
    # Which of scope/user_scope/team get forwarded to the authorize URL.
    authorize_options: list[AuthorizeOption] = Field(
        default_factory=lambda: ["scope", "user_scope", "team"]
    )
    skip_info: bool = False
    callback_path: str | None = None
    site: str = SLACK_SITE
    authorize_url: str = SLACK_AUTHORIZE_URL
    token_url: str = SLACK_TOKEN_URL
    timeout: float = 30.0

    @field_validator("scope", "user_scope", mode="before")
    @classmethod
    def _join_scope_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return value


class Credentials(SlackBaseModel):
    """Token material exposed to the hosting application.

    `expires_at` and `refresh_token` are only *set* when they apply. Use
    `as_dict()` to get the wire form, where unset fields are absent rather than
    null.
    """

    token: str | None
    expires: bool
    expires_at: int | None = None
    refresh_token: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class AuthHash(SlackBaseModel):
    """Canonical identity record produced by a completed callback."""

    provider: str = "slack"
    uid: str
    info: dict[str, Any]
    credentials: dict[str, Any]
    extra: dict[str, Any]
