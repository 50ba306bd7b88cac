"""Adapter for the legacy `identity.basic` sign-in flow."""

from __future__ import annotations

import logging
from typing import Any

from .base import BaseResponseAdapter, json_body

logger = logging.getLogger(__name__)

USERS_IDENTITY_PATH = "/api/users.identity"


class IdentityResponseAdapter(BaseResponseAdapter):
    """Reads the nested `users.identity` payload with the authorizing user's token."""

    async def raw_info(self) -> dict[str, Any]:
        response = await self.identity_access_token.get(USERS_IDENTITY_PATH)
        logger.debug("Fetched Slack users.identity", extra={"provider": "slack"})
        return json_body(response, endpoint=USERS_IDENTITY_PATH)
