"""oauthbridge configuration: per-provider settings and engine-wide options."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic_settings import BaseSettings, SettingsConfigDict

from oauthbridge.core.errors import UnconfiguredProviderError

_REQUIRED_FIELDS = (
    "client_id",
    "client_secret",
    "redirect_uri",
    "authorize_url",
    "token_url",
    "userinfo_url",
    "scopes",
    "grant_type",
)


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Static configuration for one OAuth provider. Loaded once at startup.

    ``email_url`` and ``revoke_url`` are optional; every other field must be
    non-empty for the provider to be usable.
    """

    provider_id: str
    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: tuple[str, ...] = ()
    grant_type: str = "authorization_code"
    supports_pkce: bool = False
    email_url: str | None = None
    revoke_url: str | None = None

    @property
    def scope_string(self) -> str:
        """Scopes as sent on the wire: space-joined, in configured order."""
        return " ".join(self.scopes)

    def missing_fields(self) -> list[str]:
        return [name for name in _REQUIRED_FIELDS if not getattr(self, name)]

    def ensure_usable(self) -> None:
        """Raise UnconfiguredProviderError if any required field is empty."""
        missing = self.missing_fields()
        if missing:
            raise UnconfiguredProviderError(self.provider_id, missing)


@dataclass(frozen=True, slots=True)
class OAuthBridgeConfig:
    """Engine-wide options shared by every component."""

    http_timeout: float = 10.0
    state_secret: str | None = field(default=None, repr=False)
    state_ttl_seconds: int = 600  # 10 minutes
    user_agent: str = "oauthbridge"


class ProviderCredentials(BaseSettings):
    """Credentials of a provider without declared settings fields, read under its env prefix."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    client_id: str | None = None
    client_secret: str | None = None
    redirect_uri: str | None = None


class OAuthSettings(BaseSettings):
    """Environment-sourced settings, read once at process start.

    Example .env::

        GOOGLE_CLIENT_ID=...
        GOOGLE_CLIENT_SECRET=...
        GOOGLE_REDIRECT_URI=https://app.example.com/auth/oauth/google/callback
        GITHUB_CLIENT_ID=...
        GITHUB_CLIENT_SECRET=...
        GITHUB_REDIRECT_URI=https://app.example.com/auth/oauth/github/callback
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REDIRECT_URI: str | None = None

    GITHUB_CLIENT_ID: str | None = None
    GITHUB_CLIENT_SECRET: str | None = None
    GITHUB_REDIRECT_URI: str | None = None

    OAUTH_STATE_SECRET: str | None = None
    OAUTH_HTTP_TIMEOUT: float = 10.0
    OAUTH_STATE_TTL: int = 600

    def credentials_for(
        self,
        provider_id: str,
        *,
        env_file: str | None = ".env",
    ) -> dict[str, str | None]:
        """Client id, secret and redirect URI for a provider, keyed by field name.

        Built-in providers come from the declared fields above. Any other
        provider is read from ``<ID>_CLIENT_ID``, ``<ID>_CLIENT_SECRET`` and
        ``<ID>_REDIRECT_URI`` in the environment (and ``env_file``).
        """
        prefix = provider_id.upper()
        if f"{prefix}_CLIENT_ID" in type(self).model_fields:
            return {
                "client_id": getattr(self, f"{prefix}_CLIENT_ID"),
                "client_secret": getattr(self, f"{prefix}_CLIENT_SECRET"),
                "redirect_uri": getattr(self, f"{prefix}_REDIRECT_URI"),
            }
        creds = ProviderCredentials(_env_prefix=f"{prefix}_", _env_file=env_file)
        return creds.model_dump()

    def engine_config(self) -> OAuthBridgeConfig:
        return OAuthBridgeConfig(
            http_timeout=self.OAUTH_HTTP_TIMEOUT,
            state_secret=self.OAUTH_STATE_SECRET,
            state_ttl_seconds=self.OAUTH_STATE_TTL,
        )
