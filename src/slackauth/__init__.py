"""Slack sign-in: OAuth v2 code exchange and identity normalization.

This package provides:
- `SlackStrategy`: authorize redirect, callback URL and callback handling
- Response adapters for the workspace install and legacy identity flows
- `IdentityNormalizer`: uid / info / extra / credentials for the hosting app

## Quick Example

```python
from slackauth import SlackStrategy, load_config

config = load_config({
    "client_id": "${SLACK_CLIENT_ID}",
    "client_secret": "${SLACK_CLIENT_SECRET}",
    "scope": "users:read,team:read",
})
strategy = SlackStrategy(config)
redirect_to = strategy.request_phase("https://app.example.com/login", state=state)

# on the callback route
auth = await strategy.callback_phase(code, "https://app.example.com/auth/slack/callback")
print(auth.uid, auth.info["team"])
```
"""

from .adapters import IdentityResponseAdapter, StandardResponseAdapter, build_response_adapter
from .config import load_config
from .contracts import (
    AccessToken,
    AuthenticationFailure,
    MissingFieldError,
    ProviderError,
    ResponseAdapter,
)
from .models import AuthHash, Credentials, SlackAuthConfigModel
from .normalizer import IdentityNormalizer, credentials
from .oauth2 import OAuth2AccessToken, OAuth2Client
from .scopes import identity_scoped
from .strategy import SlackStrategy

__all__ = [
    "AccessToken",
    "AuthHash",
    "AuthenticationFailure",
    "Credentials",
    "IdentityNormalizer",
    "IdentityResponseAdapter",
    "MissingFieldError",
    "OAuth2AccessToken",
    "OAuth2Client",
    "ProviderError",
    "ResponseAdapter",
    "SlackAuthConfigModel",
    "SlackStrategy",
    "StandardResponseAdapter",
    "build_response_adapter",
    "credentials",
    "identity_scoped",
    "load_config",
]
