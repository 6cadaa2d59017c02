"""oauthbridge provider variants and the default variant table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from oauthbridge.providers.base import ProviderVariant, RevokeRequest
from oauthbridge.providers.github import GitHubProvider
from oauthbridge.providers.google import GoogleProvider


def build_variant_table(
    variants: Iterable[ProviderVariant] | None = None,
) -> Mapping[str, ProviderVariant]:
    """Read-only lookup table of provider variants keyed by provider id.

    With no argument, returns the built-in Google and GitHub variants.
    """
    if variants is None:
        variants = (GoogleProvider(), GitHubProvider())
    return MappingProxyType({v.name: v for v in variants})


__all__ = [
    "ProviderVariant",
    "RevokeRequest",
    "GoogleProvider",
    "GitHubProvider",
    "build_variant_table",
]
