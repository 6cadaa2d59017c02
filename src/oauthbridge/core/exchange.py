"""Token exchange client: authorization code and refresh token grants."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from oauthbridge.config import ProviderConfig
from oauthbridge.core.errors import ExchangeError, RefreshError, UnsupportedProviderError
from oauthbridge.core.http import HTTPClientFactory, as_int, parse_body, provider_error
from oauthbridge.core.schemas import PartialTokenSet, TokenSet
from oauthbridge.providers import ProviderVariant
from oauthbridge.registry import ProviderRegistry

logger = logging.getLogger("oauthbridge.exchange")


class _TokenEndpointError(Exception):
    """Internal: a failed token endpoint call, before mapping to the public error."""

    def __init__(self, message: str, *, error: str | None = None, status: int | None = None):
        self.message = message
        self.error = error
        self.status = status
        super().__init__(message)


class TokenExchangeClient:
    """Performs the code-for-token exchange and the refresh grant.

    Args:
        registry: Provider configurations.
        variants: Provider variants keyed by provider id.
        http: Factory for the short-lived httpx clients.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        variants: Mapping[str, ProviderVariant],
        http: HTTPClientFactory,
    ) -> None:
        self._registry = registry
        self._variants = variants
        self._http = http

    def _resolve(self, provider_id: str) -> tuple[ProviderConfig, ProviderVariant]:
        config = self._registry.lookup(provider_id)
        variant = self._variants.get(provider_id)
        if variant is None:
            raise UnsupportedProviderError(provider_id)
        return config, variant

    async def exchange_code(
        self,
        provider_id: str,
        code: str,
        code_verifier: str | None = None,
        redirect_uri: str | None = None,
        *,
        timeout: float | None = None,
    ) -> TokenSet:
        """Exchange an authorization code for provider tokens.

        Args:
            code: The authorization code from the callback.
            code_verifier: PKCE verifier from the stored attempt.
            redirect_uri: Must match the one used in the authorize request.
                Defaults to the provider's configured redirect URI.

        Raises:
            ExchangeError: On transport failure, a provider error, or a
                response without an access token.
        """
        config, variant = self._resolve(provider_id)
        data = variant.build_token_params(
            config,
            code=code,
            redirect_uri=redirect_uri or config.redirect_uri,
            code_verifier=code_verifier,
        )

        try:
            body = await self._post(config, variant, data, timeout=timeout)
        except _TokenEndpointError as e:
            logger.error("%s token exchange failed: %s", provider_id, e.message)
            raise ExchangeError(
                f"Failed to exchange code for token: {e.message}",
                provider_error=e.error,
                upstream_status=e.status,
            )

        access_token = body.get("access_token")
        if not access_token:
            logger.error("%s token exchange returned no access token", provider_id)
            raise ExchangeError("No access token in provider response")

        logger.debug("%s token exchange succeeded", provider_id)
        return TokenSet(
            access_token=access_token,
            refresh_token=body.get("refresh_token") or None,
            expires_in=as_int(body.get("expires_in")),
            token_type=body.get("token_type"),
            scope=body.get("scope"),
            id_token=body.get("id_token"),
        )

    async def refresh(
        self,
        provider_id: str,
        refresh_token: str,
        *,
        timeout: float | None = None,
    ) -> PartialTokenSet:
        """Use a refresh token to obtain a new access token.

        Raises:
            RefreshError: On any failure. ``reauth_required`` is set when the
                provider rejected the refresh token itself.
        """
        config, variant = self._resolve(provider_id)
        data = variant.build_refresh_params(config, refresh_token=refresh_token)

        try:
            body = await self._post(config, variant, data, timeout=timeout)
        except _TokenEndpointError as e:
            logger.error("%s token refresh failed: %s", provider_id, e.message)
            raise RefreshError(
                f"Failed to refresh token: {e.message}",
                provider_error=e.error,
                upstream_status=e.status,
            )

        access_token = body.get("access_token")
        if not access_token:
            logger.error("%s token refresh returned no access token", provider_id)
            raise RefreshError("No access token in provider response")

        return PartialTokenSet(
            access_token=access_token,
            expires_in=as_int(body.get("expires_in")),
            refresh_token=body.get("refresh_token") or None,
            token_type=body.get("token_type"),
        )

    async def _post(
        self,
        config: ProviderConfig,
        variant: ProviderVariant,
        data: dict[str, str],
        *,
        timeout: float | None,
    ) -> dict[str, Any]:
        """POST a form to the token endpoint and return the decoded body.

        Some providers (GitHub) report errors with a 200 status, so an
        ``error`` field is treated as failure regardless of status.
        """
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        headers.update(variant.token_headers(config))

        try:
            async with self._http(timeout) as client:
                response = await client.post(config.token_url, data=data, headers=headers)
        except httpx.HTTPError as e:
            raise _TokenEndpointError(str(e) or type(e).__name__)

        body = parse_body(response)
        error, description = provider_error(body)

        if response.is_error or error:
            message = description or error or f"HTTP {response.status_code}"
            raise _TokenEndpointError(message, error=error, status=response.status_code)

        return body
