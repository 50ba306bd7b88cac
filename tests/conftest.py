"""
Global pytest configuration and fixtures.
"""

import pytest

from slackauth.models import SlackAuthConfigModel


@pytest.fixture
def slack_config() -> SlackAuthConfigModel:
    return SlackAuthConfigModel(
        client_id="cid",
        client_secret="secret",
        scope="users:read,team:read",
    )


@pytest.fixture
def identity_config() -> SlackAuthConfigModel:
    return SlackAuthConfigModel(
        client_id="cid",
        client_secret="secret",
        authorize_options=["scope", "user_scope"],
        user_scope="identity.basic,identity.email",
    )
