"""Provider registry: immutable provider configuration, built once at startup."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from oauthbridge.config import OAuthSettings, ProviderConfig
from oauthbridge.core.errors import UnconfiguredProviderError, UnknownProviderError
from oauthbridge.providers import ProviderVariant, build_variant_table

logger = logging.getLogger("oauthbridge.registry")


class ProviderRegistry:
    """Read-only mapping of provider id to ProviderConfig.

    Every config is validated at construction, so an incomplete provider
    fails at boot rather than at its first login.
    """

    def __init__(self, configs: Iterable[ProviderConfig]) -> None:
        table: dict[str, ProviderConfig] = {}
        for config in configs:
            config.ensure_usable()
            if config.provider_id in table:
                raise ValueError(f"Duplicate provider configuration: '{config.provider_id}'")
            table[config.provider_id] = config
        self._configs: Mapping[str, ProviderConfig] = MappingProxyType(table)

    def lookup(self, provider_id: str) -> ProviderConfig:
        """Return the provider's config.

        Raises:
            UnknownProviderError: If the provider is not registered.
        """
        config = self._configs.get(provider_id)
        if config is None:
            raise UnknownProviderError(provider_id)
        return config

    @property
    def provider_ids(self) -> tuple[str, ...]:
        return tuple(self._configs)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._configs

    def __iter__(self) -> Iterator[ProviderConfig]:
        return iter(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)

    def __repr__(self) -> str:
        return f"ProviderRegistry(providers={list(self._configs)!r})"

    @classmethod
    def from_settings(
        cls,
        settings: OAuthSettings,
        variants: Mapping[str, ProviderVariant] | None = None,
        *,
        env_file: str | None = ".env",
    ) -> ProviderRegistry:
        """Build the registry from environment-sourced settings.

        Providers with no credentials at all are skipped. A provider with only
        some of its credentials set is a configuration error.
        """
        if variants is None:
            variants = build_variant_table()

        configs: list[ProviderConfig] = []
        for provider_id, variant in variants.items():
            creds = settings.credentials_for(provider_id, env_file=env_file)
            if not any(creds.values()):
                logger.info("OAuth provider %s not configured, skipping", provider_id)
                continue

            missing = [
                f"{provider_id.upper()}_{field_name.upper()}"
                for field_name, value in creds.items()
                if not value
            ]
            if missing:
                raise UnconfiguredProviderError(provider_id, missing)

            configs.append(variant.make_config(
                client_id=creds["client_id"],
                client_secret=creds["client_secret"],
                redirect_uri=creds["redirect_uri"],
            ))
            logger.info("OAuth provider %s enabled", provider_id)

        return cls(configs)

    @classmethod
    def from_env(
        cls,
        *,
        env_file: str | None = ".env",
        variants: Mapping[str, ProviderVariant] | None = None,
    ) -> ProviderRegistry:
        """Build the registry from process environment (and an optional .env file)."""
        return cls.from_settings(OAuthSettings(_env_file=env_file), variants, env_file=env_file)
