"""Profile normalizer: raw provider payloads to NormalizedIdentity."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from oauthbridge.core.errors import UnsupportedProviderError
from oauthbridge.core.schemas import NormalizedIdentity
from oauthbridge.providers import ProviderVariant, build_variant_table


class ProfileNormalizer:
    """Dispatches a raw profile to its provider variant's field mapping.

    Pure: no I/O and no registry access, so it can normalize stored payloads
    for providers that are no longer configured.
    """

    def __init__(self, variants: Mapping[str, ProviderVariant] | None = None) -> None:
        self._variants = variants if variants is not None else build_variant_table()

    def normalize(self, provider_id: str, raw_profile: dict[str, Any]) -> NormalizedIdentity:
        """Map ``raw_profile`` to a NormalizedIdentity.

        Raises:
            UnsupportedProviderError: If no variant is registered for the provider.
            ProfileNormalizationError: If the payload has no subject identifier.
        """
        variant = self._variants.get(provider_id)
        if variant is None:
            raise UnsupportedProviderError(provider_id)
        return variant.normalize_profile(raw_profile)
