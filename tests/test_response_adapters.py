import pytest

from slackauth.adapters import (
    IdentityResponseAdapter,
    StandardResponseAdapter,
    build_response_adapter,
    derive_identity_access_token,
)
from slackauth.contracts import ProviderError
from slackauth.oauth2 import OAuth2AccessToken, OAuth2Client
from tests.provider_adapter_testkit import FakeAccessToken, FakeResponse, FakeResponseJsonError

AUTHED_USER = {"id": "U123", "access_token": "xoxp-user", "token_type": "user"}


def test_build_response_adapter_picks_variant() -> None:
    token = FakeAccessToken()
    assert isinstance(build_response_adapter(token, identity_scoped=True), IdentityResponseAdapter)
    assert isinstance(
        build_response_adapter(token, identity_scoped=False), StandardResponseAdapter
    )


@pytest.mark.asyncio
async def test_standard_raw_info_gets_auth_test_with_primary_token() -> None:
    token = FakeAccessToken(responses={"/api/auth.test": {"ok": True, "user_id": "U123"}})
    identity_token = FakeAccessToken(token="xoxp-user")
    adapter = StandardResponseAdapter(token, lambda client, data: identity_token)

    raw = await adapter.raw_info()

    assert token.get_calls == ["/api/auth.test"]
    assert identity_token.get_calls == []
    assert raw["user_id"] == "U123"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, {"ok": False, "error": "invalid_auth"}),
        FakeResponse(200, ["not", "an", "object"]),
        FakeResponseJsonError(200, None),
    ],
)
async def test_standard_raw_info_degrades_to_empty_mapping(response: FakeResponse) -> None:
    token = FakeAccessToken(responses={"/api/auth.test": response})
    assert await StandardResponseAdapter(token).raw_info() == {}


@pytest.mark.asyncio
async def test_identity_raw_info_gets_users_identity_with_identity_token() -> None:
    payload = {"ok": True, "user": {"id": "U123", "name": "Jimmy Page"}, "team": {"id": "T1"}}
    token = FakeAccessToken(params={"authed_user": AUTHED_USER})
    identity_token = FakeAccessToken(token="xoxp-user", responses={"/api/users.identity": payload})
    adapter = IdentityResponseAdapter(token, lambda client, data: identity_token)

    raw = await adapter.raw_info()

    assert identity_token.get_calls == ["/api/users.identity"]
    assert token.get_calls == []
    assert raw["user"] == {"id": "U123", "name": "Jimmy Page"}


def test_identity_access_token_is_memoized() -> None:
    built: list[dict[str, object]] = []

    def factory(client: object, data: dict[str, object]) -> FakeAccessToken:
        built.append(dict(data))
        return FakeAccessToken(token=str(data["access_token"]))

    adapter = StandardResponseAdapter(FakeAccessToken(params={"authed_user": AUTHED_USER}), factory)

    first = adapter.identity_access_token
    second = adapter.identity_access_token

    assert first is second
    assert first.token == "xoxp-user"
    assert built == [AUTHED_USER]


def test_identity_access_token_not_shared_between_adapters() -> None:
    token = FakeAccessToken(params={"authed_user": AUTHED_USER})
    one = IdentityResponseAdapter(token, FakeAccessToken.from_hash)
    two = IdentityResponseAdapter(token, FakeAccessToken.from_hash)
    assert one.identity_access_token is not two.identity_access_token


def test_identity_access_token_reuses_client_configuration() -> None:
    client = OAuth2Client(
        client_id="cid",
        client_secret="secret",
        site="https://slack.com",
        authorize_url="/oauth/v2/authorize",
        token_url="/api/oauth.v2.access",
    )
    primary = OAuth2AccessToken.from_hash(
        client, {"access_token": "xoxb-bot", "authed_user": AUTHED_USER}
    )

    identity = derive_identity_access_token(primary)

    assert isinstance(identity, OAuth2AccessToken)
    assert identity.client is client
    assert identity.token == "xoxp-user"
    assert identity.params["id"] == "U123"


@pytest.mark.parametrize("params", [{}, {"authed_user": None}, {"authed_user": {"id": "U1"}}])
def test_identity_access_token_requires_authed_user_token(params: dict[str, object]) -> None:
    with pytest.raises(ProviderError) as excinfo:
        derive_identity_access_token(FakeAccessToken(params=params))
    assert excinfo.value.error == "invalid_token"
