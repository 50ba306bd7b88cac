"""Response adapters for the two Slack profile payload shapes.

- `StandardResponseAdapter`: workspace install flow, reads `/api/auth.test`
- `IdentityResponseAdapter`: legacy `identity.basic` flow, reads `/api/users.identity`
"""

from ..contracts import AccessToken, ResponseAdapter
from .base import BaseResponseAdapter, TokenFactory, derive_identity_access_token, json_body
from .identity import IdentityResponseAdapter
from .standard import StandardResponseAdapter


def build_response_adapter(
    access_token: AccessToken,
    *,
    identity_scoped: bool,
    token_factory: TokenFactory | None = None,
) -> ResponseAdapter:
    """Pick the adapter matching the request's scope classification."""
    if identity_scoped:
        return IdentityResponseAdapter(access_token, token_factory)
    return StandardResponseAdapter(access_token, token_factory)


__all__ = [
    "BaseResponseAdapter",
    "IdentityResponseAdapter",
    "StandardResponseAdapter",
    "TokenFactory",
    "build_response_adapter",
    "derive_identity_access_token",
    "json_body",
]
