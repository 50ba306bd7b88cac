"""Scope classification for Slack sign-in."""

from __future__ import annotations

from collections.abc import Iterable

IDENTITY_BASIC_SCOPE = "identity.basic"


def split_scopes(value: str | None) -> list[str]:
    """Split a comma-separated scope string, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def identity_scoped(
    authorize_options: Iterable[str] | None,
    scope: str | None = None,
    user_scope: str | None = None,
) -> bool:
    """Return True when the legacy `identity.*` flow is configured.

    Only `user_scope` decides; `scope` is accepted so callers can pass the whole
    configured surface, but bot scopes never select the identity flow.
    """
    options = {str(option) for option in authorize_options or ()}
    if "user_scope" not in options:
        return False
    return IDENTITY_BASIC_SCOPE in split_scopes(user_scope)
