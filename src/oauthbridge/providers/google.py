"""Google OAuth 2.0 provider."""

from __future__ import annotations

from typing import Any, ClassVar

from oauthbridge.config import ProviderConfig
from oauthbridge.core.errors import ProfileNormalizationError
from oauthbridge.core.schemas import NormalizedIdentity
from oauthbridge.providers.base import ProviderVariant, RevokeRequest


class GoogleProvider(ProviderVariant):
    """Google OAuth provider.

    Supports PKCE. Requests offline access so a refresh token is issued.
    Default scopes: profile, email.
    """

    name: ClassVar[str] = "google"

    AUTHORIZE_URL: ClassVar[str] = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL: ClassVar[str] = "https://oauth2.googleapis.com/token"
    USERINFO_URL: ClassVar[str] = "https://www.googleapis.com/oauth2/v2/userinfo"
    REVOKE_URL: ClassVar[str | None] = "https://oauth2.googleapis.com/revoke"
    SCOPES: ClassVar[tuple[str, ...]] = ("profile", "email")
    SUPPORTS_PKCE: ClassVar[bool] = True

    def build_auth_params(
        self,
        config: ProviderConfig,
        *,
        state: str,
        nonce: str | None = None,
        code_challenge: str | None = None,
    ) -> dict[str, str]:
        """Google-specific: adds access_type=offline and prompt=consent.

        The nonce is only meaningful when an ID token is requested, so it is
        sent only with the ``openid`` scope.
        """
        params = super().build_auth_params(
            config, state=state, nonce=nonce, code_challenge=code_challenge,
        )
        if config.supports_pkce:
            params["access_type"] = "offline"
            params["prompt"] = "consent"
        if nonce and "openid" in config.scopes:
            params["nonce"] = nonce
        return params

    def revoke_request(self, config: ProviderConfig, *, token: str) -> RevokeRequest | None:
        if not config.revoke_url:
            return None
        return RevokeRequest(
            method="POST",
            url=config.revoke_url,
            data={"token": token},
        )

    def normalize_profile(self, raw_profile: dict[str, Any]) -> NormalizedIdentity:
        account_id = raw_profile.get("id") or raw_profile.get("sub")
        if not account_id:
            raise ProfileNormalizationError(self.name)

        return NormalizedIdentity(
            provider=self.name,
            provider_id=str(account_id),
            email=raw_profile.get("email") or "",
            email_verified=bool(raw_profile.get("verified_email", False)),
            first_name=raw_profile.get("given_name") or "",
            last_name=raw_profile.get("family_name") or "",
            display_name=raw_profile.get("name") or "",
            profile_picture_url=raw_profile.get("picture") or "",
            raw_profile=raw_profile,
        )
