"""OAuthBridge: instance-based entry point wiring the OAuth components together."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from oauthbridge.config import OAuthBridgeConfig, OAuthSettings
from oauthbridge.core.authorize import AuthorizationRequestBuilder
from oauthbridge.core.crypto import new_nonce, new_pkce_pair, new_state, states_match
from oauthbridge.core.errors import (
    InvalidRedirectError,
    StateMismatchError,
    UnsupportedProviderError,
)
from oauthbridge.core.exchange import TokenExchangeClient
from oauthbridge.core.http import HTTPClientFactory
from oauthbridge.core.normalize import ProfileNormalizer
from oauthbridge.core.profile import ProfileFetcher
from oauthbridge.core.revoke import RevocationClient
from oauthbridge.core.schemas import (
    AuthorizationAttempt,
    LoginResult,
    LoginStart,
    PartialTokenSet,
)
from oauthbridge.core.state import StateCodec, StatePayload
from oauthbridge.providers import GitHubProvider, GoogleProvider, ProviderVariant, build_variant_table
from oauthbridge.registry import ProviderRegistry

logger = logging.getLogger("oauthbridge")


def is_relative_path(redirect_path: str) -> bool:
    """True if the path stays on this origin once a browser has normalized it."""
    if any(ch < " " for ch in redirect_path):
        return False
    normalized = redirect_path.replace("\\", "/")
    return normalized.startswith("/") and not normalized.startswith("//")


class OAuthBridge:
    """Main OAuthBridge instance: holds the registry, config and provider clients.

    Args:
        registry: Immutable provider configuration, built once at startup.
        config: Engine-wide options (timeouts, state signing secret, TTL).
        variants: Provider variants. Defaults to the built-in Google and GitHub.
        transport: Optional httpx transport for every outbound call (testing).

    Usage::

        bridge = OAuthBridge.from_env()
        start = bridge.start_login("google", "/dashboard")
        store.save(start.attempt)
        # ... redirect the browser to start.authorization_url ...
        payload = bridge.read_state(state)
        result = await bridge.complete_login("google", code, state, store.pop(payload.state))
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        config: OAuthBridgeConfig | None = None,
        variants: Iterable[ProviderVariant] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or OAuthBridgeConfig()
        self._registry = registry
        if variants is None:
            variants = (GoogleProvider(), GitHubProvider(user_agent=self._config.user_agent))
        self._variants = build_variant_table(variants)
        for provider_id in registry.provider_ids:
            if provider_id not in self._variants:
                raise UnsupportedProviderError(provider_id)

        http = HTTPClientFactory(timeout=self._config.http_timeout, transport=transport)
        self._state_codec = StateCodec(
            self._config.state_secret, ttl_seconds=self._config.state_ttl_seconds,
        )
        self.authorizer = AuthorizationRequestBuilder(registry, self._variants, self._state_codec)
        self.exchanger = TokenExchangeClient(registry, self._variants, http)
        self.profiles = ProfileFetcher(registry, self._variants, http)
        self.normalizer = ProfileNormalizer(self._variants)
        self.revoker = RevocationClient(registry, self._variants, http)

    @classmethod
    def from_env(
        cls,
        *,
        env_file: str | None = ".env",
        variants: Iterable[ProviderVariant] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> OAuthBridge:
        """Build an instance from environment variables, failing fast on incomplete providers."""
        settings = OAuthSettings(_env_file=env_file)
        config = settings.engine_config()
        if variants is not None:
            variants = tuple(variants)
        registry = ProviderRegistry.from_settings(
            settings,
            build_variant_table(variants) if variants is not None else None,
            env_file=env_file,
        )
        return cls(registry, config=config, variants=variants, transport=transport)

    @property
    def config(self) -> OAuthBridgeConfig:
        """Read-only access to the engine config."""
        return self._config

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def providers(self) -> tuple[str, ...]:
        """Ids of the configured providers."""
        return self._registry.provider_ids

    # ------ Login flow ------

    def start_login(self, provider_id: str, redirect_path: str = "/") -> LoginStart:
        """Begin a login: fresh state/nonce/PKCE and the authorization URL.

        The caller persists ``attempt`` keyed by ``attempt.state`` and redirects
        the browser to ``authorization_url``.

        Raises:
            UnknownProviderError: If the provider is not configured.
            InvalidRedirectError: If redirect_path is not a relative path.
        """
        if not is_relative_path(redirect_path):
            raise InvalidRedirectError(redirect_path)

        config = self._registry.lookup(provider_id)
        state = new_state()
        nonce = new_nonce()
        pkce = new_pkce_pair() if config.supports_pkce else None

        url = self.authorizer.build(
            provider_id,
            state,
            nonce,
            pkce.code_challenge if pkce else None,
            redirect_path,
        )
        attempt = AuthorizationAttempt(
            provider_id=provider_id,
            state=state,
            nonce=nonce,
            redirect_path=redirect_path,
            code_verifier=pkce.code_verifier if pkce else None,
        )
        logger.debug("Started %s login attempt", provider_id)
        return LoginStart(authorization_url=url, attempt=attempt)

    def read_state(self, received_state_param: str | None) -> StatePayload:
        """Decode the callback ``state`` so the caller can look up its stored attempt.

        Raises:
            StateMismatchError: If the parameter is missing, malformed or tampered with.
        """
        return self._state_codec.decode(received_state_param)

    def validate_callback_state(
        self,
        provider_id: str,
        received_state_param: str | None,
        stored_attempt: AuthorizationAttempt | None,
    ) -> AuthorizationAttempt:
        """Check the callback state against the stored attempt.

        Raises:
            StateMismatchError: If the state is missing, malformed, tampered
                with, for another provider, different from the stored one,
                or older than the configured TTL.
        """
        payload = self._state_codec.decode(received_state_param)

        if stored_attempt is None:
            raise StateMismatchError("No pending OAuth attempt for this state")
        if stored_attempt.provider_id != provider_id:
            raise StateMismatchError("OAuth state provider mismatch")
        if not states_match(payload.state, stored_attempt.state):
            raise StateMismatchError()
        if stored_attempt.is_expired(self._config.state_ttl_seconds):
            raise StateMismatchError("OAuth state expired")
        return stored_attempt

    async def complete_login(
        self,
        provider_id: str,
        code: str,
        received_state_param: str | None,
        stored_attempt: AuthorizationAttempt | None,
        *,
        redirect_uri: str | None = None,
        timeout: float | None = None,
    ) -> LoginResult:
        """Complete the OAuth flow: validate state, exchange code, fetch and normalize the profile.

        State is validated before anything touches the network. The redirect
        path is taken from the stored attempt, not from the wire. ``timeout``
        overrides the configured HTTP timeout for each outbound call.
        """
        self._registry.lookup(provider_id)
        attempt = self.validate_callback_state(provider_id, received_state_param, stored_attempt)

        tokens = await self.exchanger.exchange_code(
            provider_id, code, attempt.code_verifier, redirect_uri, timeout=timeout,
        )
        raw_profile = await self.profiles.fetch(provider_id, tokens.access_token, timeout=timeout)
        identity = self.normalizer.normalize(provider_id, raw_profile)

        logger.info("Completed %s login for provider subject %s", provider_id, identity.provider_id)
        return LoginResult(identity=identity, tokens=tokens, redirect_path=attempt.redirect_path)

    # ------ Token lifecycle ------

    async def refresh_access_token(
        self,
        provider_id: str,
        refresh_token: str,
        *,
        timeout: float | None = None,
    ) -> PartialTokenSet:
        """Obtain a new provider access token from a refresh token."""
        return await self.exchanger.refresh(provider_id, refresh_token, timeout=timeout)

    async def unlink(self, provider_id: str, token: str, *, timeout: float | None = None) -> None:
        """Revoke the provider token. Always returns, even if revocation fails."""
        await self.revoker.revoke(provider_id, token, timeout=timeout)
