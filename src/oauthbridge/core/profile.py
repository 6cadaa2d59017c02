"""Profile fetcher: the authenticated user's raw profile from the provider API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from oauthbridge.config import ProviderConfig
from oauthbridge.core.errors import ProfileFetchError, UnsupportedProviderError
from oauthbridge.core.http import HTTPClientFactory
from oauthbridge.providers import ProviderVariant
from oauthbridge.registry import ProviderRegistry

logger = logging.getLogger("oauthbridge.profile")


def select_email(entries: list[dict[str, Any]]) -> str | None:
    """Pick the primary verified address from an email list, else the first entry's."""
    for entry in entries:
        if entry.get("primary") and entry.get("verified"):
            return entry.get("email")
    if entries:
        return entries[0].get("email")
    return None


class ProfileFetcher:
    """Fetches raw provider profiles with a bearer access token."""

    def __init__(
        self,
        registry: ProviderRegistry,
        variants: Mapping[str, ProviderVariant],
        http: HTTPClientFactory,
    ) -> None:
        self._registry = registry
        self._variants = variants
        self._http = http

    async def fetch(
        self,
        provider_id: str,
        access_token: str,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Fetch the user's profile.

        When the profile has no email and the provider exposes an email-list
        endpoint, the address is looked up there. Providers that inline the
        email never trigger the second call.

        Returns a copy of the raw profile with ``email`` filled in.

        Raises:
            ProfileFetchError: On transport errors, HTTP errors or malformed
                payloads. ``upstream_status`` is None for transport failures.
        """
        config = self._registry.lookup(provider_id)
        variant = self._variants.get(provider_id)
        if variant is None:
            raise UnsupportedProviderError(provider_id)

        headers = variant.api_headers(config, access_token=access_token)

        async with self._http(timeout) as client:
            profile = await self._get(client, config, config.userinfo_url, headers)
            if not isinstance(profile, dict):
                raise ProfileFetchError(
                    f"Unexpected profile payload from {provider_id}",
                    upstream_status=200,
                )
            profile = dict(profile)

            if not profile.get("email") and config.email_url:
                logger.debug("%s profile has no email, querying email list", provider_id)
                entries = await self._get(client, config, config.email_url, headers)
                if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
                    raise ProfileFetchError(
                        f"Unexpected email list payload from {provider_id}",
                        upstream_status=200,
                    )
                profile["email"] = select_email(entries)

        return profile

    async def _get(
        self,
        client: httpx.AsyncClient,
        config: ProviderConfig,
        url: str,
        headers: dict[str, str],
    ) -> Any:
        try:
            response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error("%s profile request failed: %s", config.provider_id, type(e).__name__)
            raise ProfileFetchError(f"Failed to fetch user profile: {str(e) or type(e).__name__}")

        if response.is_error:
            logger.error(
                "%s profile request returned HTTP %d", config.provider_id, response.status_code,
            )
            raise ProfileFetchError(
                f"Failed to fetch user profile: HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise ProfileFetchError(
                f"Invalid JSON in {config.provider_id} profile response",
                upstream_status=response.status_code,
            )
