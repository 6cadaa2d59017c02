"""Authorization request builder: the URL the user's browser is redirected to."""

from __future__ import annotations

import urllib.parse
from collections.abc import Mapping

from oauthbridge.core.errors import UnsupportedProviderError
from oauthbridge.core.state import StateCodec
from oauthbridge.providers import ProviderVariant
from oauthbridge.registry import ProviderRegistry


class AuthorizationRequestBuilder:
    """Builds provider authorization URLs. Side-effect free."""

    def __init__(
        self,
        registry: ProviderRegistry,
        variants: Mapping[str, ProviderVariant],
        state_codec: StateCodec,
    ) -> None:
        self._registry = registry
        self._variants = variants
        self._state_codec = state_codec

    def build(
        self,
        provider_id: str,
        state: str,
        nonce: str | None,
        code_challenge: str | None,
        redirect_path: str = "/",
    ) -> str:
        """Build the full authorization URL with query params.

        The wire ``state`` carries the random token and the redirect path.
        PKCE params are only added for providers that support PKCE.

        Raises:
            UnknownProviderError: If the provider is not registered.
        """
        config = self._registry.lookup(provider_id)
        variant = self._variants.get(provider_id)
        if variant is None:
            raise UnsupportedProviderError(provider_id)

        params = variant.build_auth_params(
            config,
            state=self._state_codec.encode(state, redirect_path),
            nonce=nonce,
            code_challenge=code_challenge,
        )
        return f"{config.authorize_url}?{urllib.parse.urlencode(params)}"
