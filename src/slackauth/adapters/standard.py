"""Adapter for the workspace installation (bot token) flow."""

from __future__ import annotations

import logging
from typing import Any

from .base import BaseResponseAdapter, json_body

logger = logging.getLogger(__name__)

AUTH_TEST_PATH = "/api/auth.test"


class StandardResponseAdapter(BaseResponseAdapter):
    """Reads the flat `auth.test` payload using the primary token."""

    async def raw_info(self) -> dict[str, Any]:
        response = await self.access_token.get(AUTH_TEST_PATH)
        logger.debug("Fetched Slack auth.test", extra={"provider": "slack"})
        return json_body(response, endpoint=AUTH_TEST_PATH)
