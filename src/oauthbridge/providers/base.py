"""Provider variant base class: the per-provider hooks the core engine calls.

The engine never branches on provider names. Everything that differs between
providers (extra authorize params, token request shape, headers, profile
mapping, revocation) is answered by the provider's variant.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, ClassVar

from oauthbridge.config import ProviderConfig
from oauthbridge.core.crypto import PKCE_METHOD
from oauthbridge.core.schemas import NormalizedIdentity


@dataclass(frozen=True, slots=True)
class RevokeRequest:
    """HTTP request that revokes a token at the provider."""

    method: str
    url: str
    data: dict[str, str] | None = field(default=None, repr=False)
    json: dict[str, str] | None = field(default=None, repr=False)
    headers: dict[str, str] = field(default_factory=dict)
    auth: tuple[str, str] | None = field(default=None, repr=False)


class ProviderVariant(abc.ABC):
    """Abstract base for provider variants.

    Subclasses must define:
        name                  provider identifier (e.g. "google", "github")
        AUTHORIZE_URL, TOKEN_URL, USERINFO_URL
        normalize_profile()   map the raw profile to NormalizedIdentity

    and may override the request-shaping hooks.
    """

    name: ClassVar[str]

    AUTHORIZE_URL: ClassVar[str]
    TOKEN_URL: ClassVar[str]
    USERINFO_URL: ClassVar[str]
    EMAIL_URL: ClassVar[str | None] = None
    REVOKE_URL: ClassVar[str | None] = None
    SCOPES: ClassVar[tuple[str, ...]] = ()
    SUPPORTS_PKCE: ClassVar[bool] = False

    def make_config(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        extra_scopes: tuple[str, ...] = (),
    ) -> ProviderConfig:
        """Build this provider's ProviderConfig from its client credentials."""
        return ProviderConfig(
            provider_id=self.name,
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            authorize_url=self.AUTHORIZE_URL,
            token_url=self.TOKEN_URL,
            userinfo_url=self.USERINFO_URL,
            scopes=_merge_scopes(self.SCOPES, extra_scopes),
            supports_pkce=self.SUPPORTS_PKCE,
            email_url=self.EMAIL_URL,
            revoke_url=self.REVOKE_URL,
        )

    def build_auth_params(
        self,
        config: ProviderConfig,
        *,
        state: str,
        nonce: str | None = None,
        code_challenge: str | None = None,
    ) -> dict[str, str]:
        """Query params for the authorization redirect.

        ``state`` is the already-encoded wire value. PKCE params are added
        only when the provider supports PKCE.
        """
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
            "scope": config.scope_string,
            "state": state,
        }
        if config.supports_pkce:
            if not code_challenge:
                raise ValueError(f"Provider '{config.provider_id}' requires a PKCE code_challenge")
            params["code_challenge"] = code_challenge
            params["code_challenge_method"] = PKCE_METHOD
        return params

    def build_token_params(
        self,
        config: ProviderConfig,
        *,
        code: str,
        redirect_uri: str,
        code_verifier: str | None = None,
    ) -> dict[str, str]:
        """Form body for the authorization code exchange."""
        data = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        }
        if config.supports_pkce:
            data["grant_type"] = config.grant_type
            if code_verifier:
                data["code_verifier"] = code_verifier
        return data

    def build_refresh_params(self, config: ProviderConfig, *, refresh_token: str) -> dict[str, str]:
        return {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

    def token_headers(self, config: ProviderConfig) -> dict[str, str]:
        """Extra headers for token endpoint requests."""
        return {}

    def api_headers(self, config: ProviderConfig, *, access_token: str) -> dict[str, str]:
        """Headers for userinfo and email-list requests."""
        return {"Authorization": f"Bearer {access_token}"}

    def revoke_request(self, config: ProviderConfig, *, token: str) -> RevokeRequest | None:
        """The provider's revocation call, or None if it has none."""
        return None

    @abc.abstractmethod
    def normalize_profile(self, raw_profile: dict[str, Any]) -> NormalizedIdentity:
        """Map this provider's raw profile payload to a NormalizedIdentity."""
        ...


def _merge_scopes(required: tuple[str, ...], extra: tuple[str, ...]) -> tuple[str, ...]:
    """Required + extra scopes, deduplicated and order-preserving."""
    seen: set[str] = set()
    result: list[str] = []
    for s in required + tuple(extra):
        if s not in seen:
            seen.add(s)
            result.append(s)
    return tuple(result)


def split_full_name(full_name: str | None) -> tuple[str, str]:
    """Split a display name into (first, last) at the first space."""
    if not full_name:
        return "", ""
    first, _, last = full_name.partition(" ")
    return first, last
