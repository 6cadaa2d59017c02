"""GitHub OAuth 2.0 provider."""

from __future__ import annotations

from typing import Any, ClassVar

from oauthbridge.config import ProviderConfig
from oauthbridge.core.errors import ProfileNormalizationError
from oauthbridge.core.schemas import NormalizedIdentity
from oauthbridge.providers.base import ProviderVariant, RevokeRequest, split_full_name


class GitHubProvider(ProviderVariant):
    """GitHub OAuth provider.

    No PKCE. The token endpoint answers form-encoded unless asked for JSON,
    the REST API rejects requests without a User-Agent, and /user omits the
    email when it is private, so /user/emails is configured as a fallback.
    """

    name: ClassVar[str] = "github"

    AUTHORIZE_URL: ClassVar[str] = "https://github.com/login/oauth/authorize"
    TOKEN_URL: ClassVar[str] = "https://github.com/login/oauth/access_token"
    USERINFO_URL: ClassVar[str] = "https://api.github.com/user"
    EMAIL_URL: ClassVar[str | None] = "https://api.github.com/user/emails"
    REVOKE_URL: ClassVar[str | None] = "https://api.github.com/applications/{client_id}/grant"
    SCOPES: ClassVar[tuple[str, ...]] = ("user:email", "read:user")

    def __init__(self, user_agent: str = "oauthbridge") -> None:
        self.user_agent = user_agent

    def token_headers(self, config: ProviderConfig) -> dict[str, str]:
        return {"Accept": "application/json"}

    def api_headers(self, config: ProviderConfig, *, access_token: str) -> dict[str, str]:
        headers = super().api_headers(config, access_token=access_token)
        headers["User-Agent"] = self.user_agent
        headers["Accept"] = "application/vnd.github+json"
        return headers

    def revoke_request(self, config: ProviderConfig, *, token: str) -> RevokeRequest | None:
        """Delete the OAuth grant via the application API (basic auth with client credentials)."""
        if not config.revoke_url:
            return None
        return RevokeRequest(
            method="DELETE",
            url=config.revoke_url.format(client_id=config.client_id),
            json={"access_token": token},
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": self.user_agent,
            },
            auth=(config.client_id, config.client_secret),
        )

    def normalize_profile(self, raw_profile: dict[str, Any]) -> NormalizedIdentity:
        account_id = raw_profile.get("id")
        if account_id is None or account_id == "":
            raise ProfileNormalizationError(self.name)

        login = raw_profile.get("login") or ""
        full_name = raw_profile.get("name")
        first_name, last_name = split_full_name(full_name)

        return NormalizedIdentity(
            provider=self.name,
            provider_id=str(account_id),
            email=raw_profile.get("email") or "",
            # GitHub only hands out emails it has verified
            email_verified=True,
            first_name=first_name or login,
            last_name=last_name,
            display_name=full_name or login,
            profile_picture_url=raw_profile.get("avatar_url") or "",
            raw_profile=raw_profile,
        )
