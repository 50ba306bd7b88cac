import pytest

from slackauth.models import SlackAuthConfigModel
from slackauth.scopes import identity_scoped, split_scopes
from slackauth.strategy import SlackStrategy


def test_identity_scoped_with_identity_basic_user_scope() -> None:
    assert identity_scoped(["scope", "user_scope"], user_scope="identity.basic")


@pytest.mark.parametrize(
    "user_scope",
    [
        "team.read,identity.basic,users.read",
        "identity.basic,users.read",
        "users.read,identity.basic",
        " users.read , identity.basic ",
        "identity.basic ,identity.email",
    ],
)
def test_identity_scoped_among_other_user_scopes(user_scope: str) -> None:
    assert identity_scoped(["scope", "user_scope"], user_scope=user_scope)


@pytest.mark.parametrize("user_scope", ["identity.basic", "identity.basic,users.read"])
def test_not_identity_scoped_without_user_scope_option(user_scope: str) -> None:
    # Scope content is irrelevant when user_scope is not forwarded.
    assert not identity_scoped(["scope"], scope="identity.basic", user_scope=user_scope)


def test_not_identity_scoped_when_scope_missing() -> None:
    assert not identity_scoped(["scope"], scope="identity.email")
    assert not identity_scoped(["scope", "user_scope"], user_scope="identity.email")
    assert not identity_scoped(["scope", "user_scope"], user_scope="identity.basic.extra")


@pytest.mark.parametrize("user_scope", [None, "", ",,", "   "])
def test_absent_or_malformed_user_scope_is_not_identity_scoped(user_scope: str | None) -> None:
    assert not identity_scoped(["scope", "user_scope"], user_scope=user_scope)


def test_missing_authorize_options_is_not_identity_scoped() -> None:
    assert not identity_scoped(None, user_scope="identity.basic")


def test_split_scopes_trims_and_drops_blanks() -> None:
    assert split_scopes(" a, b ,,c ") == ["a", "b", "c"]


def test_strategy_defaults_are_not_identity_scoped() -> None:
    strategy = SlackStrategy(SlackAuthConfigModel(client_id="cid", client_secret="secret"))
    assert not strategy.identity_scoped


def test_strategy_identity_scoped_from_config(identity_config: SlackAuthConfigModel) -> None:
    assert SlackStrategy(identity_config).identity_scoped


def test_list_user_scope_is_joined() -> None:
    config = SlackAuthConfigModel(
        client_id="cid",
        client_secret="secret",
        user_scope=["identity.basic", "identity.email"],  # type: ignore[arg-type]
    )
    assert config.user_scope == "identity.basic,identity.email"
    assert SlackStrategy(config).identity_scoped
