"""Normalization of Slack token and profile payloads into an identity record.

The normalizer is built once per callback. It fetches the raw profile through a
response adapter, optionally enriches it with a `users.info` lookup, and
exposes the pieces the hosting application consumes: `uid`, `info`, `extra`
and `credentials`.

Fetches happen lazily and at most once per normalizer, so calling `info()` and
`extra()` back to back issues a single profile fetch and a single enrichment
fetch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from .adapters.base import json_body
from .contracts import AccessToken, MissingFieldError, ResponseAdapter
from .models import AuthHash, Credentials

logger = logging.getLogger(__name__)

USERS_INFO_PATH = "/api/users.info"

IMAGE_SIZES = ("24", "32", "48", "72", "192", "512")


def credentials(access_token: AccessToken) -> Credentials:
    """Shape token material; `expires_at`/`refresh_token` are set only when they apply."""
    expires = bool(access_token.expires)
    fields: dict[str, Any] = {"token": access_token.token, "expires": expires}
    if expires:
        fields["expires_at"] = access_token.expires_at
        if access_token.refresh_token is not None:
            fields["refresh_token"] = access_token.refresh_token
    return Credentials(**fields)


def web_hook_info(access_token: AccessToken) -> dict[str, Any]:
    webhook = access_token.params.get("incoming_webhook")
    return dict(webhook) if isinstance(webhook, Mapping) else {}


def bot_info(access_token: AccessToken) -> dict[str, Any]:
    return {
        key: access_token.params[key]
        for key in ("bot_user_id", "app_id")
        if access_token.params.get(key) is not None
    }


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def extended_info(user_info: Mapping[str, Any]) -> dict[str, Any]:
    """Profile fields from a `users.info` or `users.identity` user mapping.

    `users.info` nests most fields under `profile`; `users.identity` keeps them
    at the top level. Absent values are dropped.
    """
    profile = _mapping(user_info.get("profile"))
    fields: dict[str, Any] = {
        "name": _first(profile.get("real_name"), user_info.get("real_name"), user_info.get("name")),
        "email": _first(profile.get("email"), user_info.get("email")),
        "display_name": profile.get("display_name"),
        "first_name": profile.get("first_name"),
        "last_name": profile.get("last_name"),
        "description": profile.get("title"),
        "image": _first(profile.get("image_192"), user_info.get("image_192")),
    }
    for size in IMAGE_SIZES:
        key = f"image_{size}"
        fields[key] = _first(profile.get(key), user_info.get(key))
    fields["time_zone"] = user_info.get("tz")
    fields["is_admin"] = user_info.get("is_admin")
    fields["is_owner"] = user_info.get("is_owner")
    return {key: value for key, value in fields.items() if value is not None}


class IdentityNormalizer:
    """Turns one Slack callback's token into uid/info/extra/credentials."""

    def __init__(
        self,
        access_token: AccessToken,
        response_adapter: ResponseAdapter,
        *,
        identity_scoped: bool,
        skip_info: bool = False,
    ):
        self.access_token = access_token
        self.response_adapter = response_adapter
        self.identity_scoped = identity_scoped
        self.skip_info = skip_info
        self._raw_info: dict[str, Any] | None = None
        self._user_info: dict[str, Any] | None = None

    async def raw_info(self) -> dict[str, Any]:
        if self._raw_info is None:
            self._raw_info = await self.response_adapter.raw_info()
        return self._raw_info

    async def uid(self) -> str:
        raw = await self.raw_info()
        if self.identity_scoped:
            field = "user.id"
            value = _mapping(raw.get("user")).get("id")
        else:
            field = "user_id"
            value = raw.get("user_id")
        if not value:
            logger.warning(
                "Slack profile missing uid", extra={"provider": "slack", "field": field}
            )
            raise MissingFieldError(field)
        return str(value)

    async def user_info(self) -> dict[str, Any]:
        if self._user_info is None:
            self._user_info = await self._fetch_user_info()
        return self._user_info

    async def _fetch_user_info(self) -> dict[str, Any]:
        raw = await self.raw_info()
        if self.identity_scoped:
            # users.identity already carries the profile.
            return dict(_mapping(raw.get("user")))

        user_id = raw.get("user_id")
        if not user_id:
            logger.debug("Skipping users.info: no user_id", extra={"provider": "slack"})
            return {}

        response = await self.access_token.get(
            f"{USERS_INFO_PATH}?{urlencode({'user': str(user_id)})}"
        )
        body = json_body(response, endpoint=USERS_INFO_PATH)
        user = body.get("user")
        if isinstance(user, Mapping):
            return dict(user)
        if body:
            logger.warning(
                "Slack users.info response had no user object",
                extra={"provider": "slack", "endpoint": USERS_INFO_PATH},
            )
        return body

    def base_info(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        if self.identity_scoped:
            user = _mapping(raw.get("user"))
            team = _mapping(raw.get("team"))
            return {
                "nickname": user.get("name"),
                "team": team.get("name"),
                "user": user.get("name"),
                "team_id": team.get("id"),
                "user_id": user.get("id"),
            }
        return {
            "nickname": raw.get("user"),
            "team": raw.get("team"),
            "user": raw.get("user"),
            "team_id": raw.get("team_id"),
            "user_id": raw.get("user_id"),
        }

    async def info(self) -> dict[str, Any]:
        info = self.base_info(await self.raw_info())
        if self.skip_info:
            return info
        for key, value in extended_info(await self.user_info()).items():
            info.setdefault(key, value)
        return info

    async def extra(self) -> dict[str, Any]:
        extra: dict[str, Any] = {"raw_info": await self.raw_info()}
        if self.skip_info:
            return extra
        extra["web_hook_info"] = web_hook_info(self.access_token)
        extra["bot_info"] = bot_info(self.access_token)
        extra["user_info"] = await self.user_info()
        return extra

    def credentials(self) -> Credentials:
        return credentials(self.access_token)

    async def auth_hash(self) -> AuthHash:
        """Assemble the full identity record; uid is resolved first."""
        uid = await self.uid()
        return AuthHash(
            uid=uid,
            info=await self.info(),
            credentials=self.credentials().as_dict(),
            extra=await self.extra(),
        )
