from datetime import UTC, datetime, timedelta

import jwt
import pytest

from jitsi_bridge.enums import TokenFailureCause
from jitsi_bridge.errors import TokenSigningError, TokenVerificationError
from jitsi_bridge.schemas.meeting import TokenClaims, TokenContext, TokenUser
from jitsi_bridge.services.configuration import RouteConfig, SiteSettings

from tests.conftest import PRIMARY_SECRET, SECONDARY_SECRET


@pytest.fixture
def route() -> RouteConfig:
    return RouteConfig(
        base_url="https://meet.primary.example",
        jwt_enabled=True,
        link_valid_minutes=15,
        app_id="primary-app",
        app_secret=PRIMARY_SECRET,
    )


@pytest.fixture
def claims() -> TokenClaims:
    return TokenClaims(
        iss="primary-app",
        aud=["primary-app"],
        sub="meet.primary.example",
        exp=int((datetime.now(UTC) + timedelta(minutes=10)).timestamp()),
        room="SprintReview",
        context=TokenContext(
            user=TokenUser(id="user-bob", name="Bobby"), group="team-primary"
        ),
    )


class TestBuildClaims:
    def test_claims_follow_route(self, token_service, route, alice):
        now = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)
        claims = token_service.build_claims(
            route, "SprintReview", alice, SiteSettings(site_url="https://chat.example.com"),
            group="team-primary", now=now,
        )
        assert claims.iss == "primary-app"
        assert claims.aud == ["primary-app"]
        assert claims.sub == "meet.primary.example"
        assert claims.room == "SprintReview"
        assert claims.exp == int((now + timedelta(minutes=15)).timestamp())
        assert claims.exp > int(now.timestamp())
        assert claims.context.group == "team-primary"

    def test_non_positive_validity_cannot_be_signed(self, token_service, route, alice):
        bad_route = RouteConfig(
            base_url=route.base_url, jwt_enabled=True, link_valid_minutes=0,
            app_id="a", app_secret=PRIMARY_SECRET,
        )
        with pytest.raises(TokenSigningError):
            token_service.build_claims(
                bad_route, "Room", alice, SiteSettings(site_url="https://chat.example.com")
            )


class TestIdentityContext:
    def test_private_site_hides_full_name_and_email(self, token_service, alice):
        identity = token_service.build_identity_context(
            alice, SiteSettings(site_url="https://chat.example.com/")
        )
        assert identity.id == "user-alice"
        assert identity.name == "alice"
        assert identity.email == ""
        assert identity.avatar == (
            "https://chat.example.com/api/v4/users/user-alice/image?_=1700000000"
        )

    def test_public_site_shows_full_name_and_email(self, token_service, alice):
        identity = token_service.build_identity_context(
            alice,
            SiteSettings(
                site_url="https://chat.example.com",
                show_full_name=True,
                show_email_address=True,
            ),
        )
        assert identity.name == "Alice Liddell"
        assert identity.email == "alice@example.com"


class TestSignAndVerify:
    def test_token_is_compact_hs256(self, token_service, claims):
        token = token_service.sign(claims, PRIMARY_SECRET)
        assert token.count(".") == 2
        assert jwt.get_unverified_header(token)["alg"] == "HS256"
        assert token_service.verify(token, PRIMARY_SECRET) == claims

    def test_audience_is_checked_when_given(self, token_service, claims):
        token = token_service.sign(claims, PRIMARY_SECRET)
        assert token_service.verify(token, PRIMARY_SECRET, audience="primary-app").room == "SprintReview"
        with pytest.raises(TokenVerificationError) as info:
            token_service.verify(token, PRIMARY_SECRET, audience="someone-else")
        assert info.value.cause == TokenFailureCause.INVALID_CLAIMS

    def test_signing_without_secret_fails(self, token_service, claims):
        with pytest.raises(TokenSigningError):
            token_service.sign(claims, "")

    def test_wrong_secret_is_invalid_signature(self, token_service, claims):
        token = token_service.sign(claims, PRIMARY_SECRET)
        with pytest.raises(TokenVerificationError) as info:
            token_service.verify(token, SECONDARY_SECRET)
        assert info.value.cause == TokenFailureCause.INVALID_SIGNATURE

    def test_expired_token(self, token_service, claims):
        expired = claims.model_copy(
            update={"exp": int((datetime.now(UTC) - timedelta(minutes=5)).timestamp())}
        )
        token = token_service.sign(expired, PRIMARY_SECRET)
        with pytest.raises(TokenVerificationError) as info:
            token_service.verify(token, PRIMARY_SECRET)
        assert info.value.cause == TokenFailureCause.EXPIRED

    def test_garbage_is_malformed(self, token_service):
        with pytest.raises(TokenVerificationError) as info:
            token_service.verify("not-a-token", PRIMARY_SECRET)
        assert info.value.cause == TokenFailureCause.MALFORMED

    def test_foreign_payload_is_invalid_claims(self, token_service):
        exp = int((datetime.now(UTC) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"exp": exp, "hello": "world"}, PRIMARY_SECRET, algorithm="HS256")
        with pytest.raises(TokenVerificationError) as info:
            token_service.verify(token, PRIMARY_SECRET)
        assert info.value.cause == TokenFailureCause.INVALID_CLAIMS


class TestRefreshIdentityContext:
    def test_refresh_replaces_user_and_keeps_room_expiry_group(
        self, token_service, claims, alice
    ):
        token = token_service.sign(claims, PRIMARY_SECRET)
        site = SiteSettings(site_url="https://chat.example.com", show_full_name=True)

        refreshed = token_service.refresh_identity_context(token, PRIMARY_SECRET, alice, site)
        result = token_service.verify(refreshed, PRIMARY_SECRET)

        assert result.context.user.id == alice.id
        assert result.context.user.name == "Alice Liddell"
        assert result.context.user.email == ""
        assert result.context.group == claims.context.group
        assert result.room == claims.room
        assert result.exp == claims.exp

    def test_refresh_rejects_token_from_other_secret(self, token_service, claims, alice):
        token = token_service.sign(claims, SECONDARY_SECRET)
        with pytest.raises(TokenVerificationError):
            token_service.refresh_identity_context(
                token, PRIMARY_SECRET, alice, SiteSettings(site_url="https://chat.example.com")
            )
