"""Best-effort token revocation at the provider."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from oauthbridge.core.http import HTTPClientFactory
from oauthbridge.providers import ProviderVariant
from oauthbridge.registry import ProviderRegistry

logger = logging.getLogger("oauthbridge.revoke")


class RevocationClient:
    """Revokes provider tokens. Never raises: logout must succeed locally."""

    def __init__(
        self,
        registry: ProviderRegistry,
        variants: Mapping[str, ProviderVariant],
        http: HTTPClientFactory,
    ) -> None:
        self._registry = registry
        self._variants = variants
        self._http = http

    async def revoke(self, provider_id: str, token: str, *, timeout: float | None = None) -> None:
        """Issue the provider's revocation call if it has one.

        Failures are logged (without the token) and swallowed.
        """
        try:
            config = self._registry.lookup(provider_id)
            variant = self._variants.get(provider_id)
            request = variant.revoke_request(config, token=token) if variant is not None else None
            if request is None:
                logger.debug("No revocation endpoint known for %s", provider_id)
                return

            async with self._http(timeout) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    data=request.data,
                    json=request.json,
                    headers=request.headers,
                    auth=request.auth,
                )
                response.raise_for_status()
        except Exception as e:
            logger.warning("%s token revocation failed: %s", provider_id, type(e).__name__)
            return

        logger.info("Successfully revoked %s token", provider_id)
