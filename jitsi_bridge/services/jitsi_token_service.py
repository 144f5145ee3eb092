from datetime import UTC, datetime, timedelta
from typing import Optional

import jwt
from loguru import logger
from pydantic import ValidationError

from jitsi_bridge.enums import TokenFailureCause
from jitsi_bridge.errors import TokenSigningError, TokenVerificationError
from jitsi_bridge.schemas.meeting import TokenClaims, TokenContext, TokenUser
from jitsi_bridge.schemas.platform import User
from jitsi_bridge.services.configuration import RouteConfig, SiteSettings


class JitsiTokenService:
    """Signs and verifies Jitsi room tokens (HS256)."""

    ALGORITHM = "HS256"

    def build_claims(
        self,
        route: RouteConfig,
        room: str,
        user: User,
        site: SiteSettings,
        group: str = "",
        now: Optional[datetime] = None,
    ) -> TokenClaims:
        if route.link_valid_minutes <= 0:
            raise TokenSigningError("link_valid_minutes must be positive")

        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + timedelta(minutes=route.link_valid_minutes)

        return TokenClaims(
            iss=route.app_id,
            aud=[route.app_id],
            sub=route.host,
            exp=int(expires_at.timestamp()),
            room=room,
            context=TokenContext(
                user=self.build_identity_context(user, site), group=group
            ),
        )

    @staticmethod
    def build_identity_context(user: User, site: SiteSettings) -> TokenUser:
        """Identity shown inside the meeting, redacted per the site's privacy settings."""
        sanitized = user
        if not site.show_full_name:
            sanitized = sanitized.model_copy(update={"first_name": "", "last_name": ""})
        if not site.show_email_address:
            sanitized = sanitized.model_copy(update={"email": ""})

        return TokenUser(
            avatar=(
                f"{site.site_url.rstrip('/')}/api/v4/users/{sanitized.id}/image"
                f"?_={sanitized.last_picture_update}"
            ),
            name=sanitized.display_name(),
            email=sanitized.email,
            id=sanitized.id,
        )

    def sign(self, claims: TokenClaims, secret: str) -> str:
        if not secret:
            raise TokenSigningError("Cannot sign a meeting token without a secret")
        try:
            return jwt.encode(claims.model_dump(), secret, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.error(f"Error signing meeting token for room {claims.room}: {exc}")
            raise TokenSigningError("Unable to sign meeting token") from exc

    def verify(
        self, token: str, secret: str, audience: Optional[str] = None
    ) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.

        Raises:
            TokenVerificationError: ``cause`` tells expired, bad signature,
                malformed token and unexpected claims apart
        """
        if not secret:
            raise TokenVerificationError(
                TokenFailureCause.INVALID_SIGNATURE, "No secret to verify the token with"
            )
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.ALGORITHM],
                audience=audience,
                options={"verify_aud": audience is not None, "require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenVerificationError(TokenFailureCause.EXPIRED) from exc
        except jwt.InvalidSignatureError as exc:
            raise TokenVerificationError(TokenFailureCause.INVALID_SIGNATURE) from exc
        except jwt.DecodeError as exc:
            raise TokenVerificationError(TokenFailureCause.MALFORMED) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenVerificationError(
                TokenFailureCause.INVALID_CLAIMS, str(exc)
            ) from exc

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as exc:
            raise TokenVerificationError(
                TokenFailureCause.INVALID_CLAIMS, "Token payload is not a meeting token"
            ) from exc

    def refresh_identity_context(
        self, token: str, secret: str, user: User, site: SiteSettings
    ) -> str:
        """Re-issue ``token`` with ``user`` as the identity; room, expiry and group are kept."""
        claims = self.verify(token, secret)
        refreshed = claims.model_copy(
            update={
                "context": TokenContext(
                    user=self.build_identity_context(user, site),
                    group=claims.context.group,
                )
            }
        )
        return self.sign(refreshed, secret)
