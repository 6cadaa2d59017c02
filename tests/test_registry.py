"""Tests for provider configuration and the registry."""

import dataclasses

import pytest

from conftest import GitLabProvider, github_config, google_config
from oauthbridge.config import OAuthSettings
from oauthbridge.core.errors import UnconfiguredProviderError, UnknownProviderError
from oauthbridge.providers import GitHubProvider, GoogleProvider, build_variant_table
from oauthbridge.registry import ProviderRegistry


class TestProviderConfig:
    def test_google_defaults(self):
        config = google_config()
        assert config.provider_id == "google"
        assert config.supports_pkce is True
        assert config.scope_string == "profile email"
        assert config.email_url is None
        assert config.grant_type == "authorization_code"

    def test_github_defaults(self):
        config = github_config()
        assert config.supports_pkce is False
        assert config.scope_string == "user:email read:user"
        assert config.email_url == "https://api.github.com/user/emails"

    def test_secret_not_in_repr(self):
        assert "google-client-secret" not in repr(google_config())

    def test_frozen(self):
        config = google_config()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.client_id = "other"

    def test_missing_fields_reported(self):
        config = google_config(client_secret="", redirect_uri="")
        assert config.missing_fields() == ["client_secret", "redirect_uri"]
        with pytest.raises(UnconfiguredProviderError) as exc_info:
            config.ensure_usable()
        assert exc_info.value.missing == ("client_secret", "redirect_uri")


class TestRegistry:
    def test_lookup(self, registry):
        assert registry.lookup("google").client_id == "google-client-id"
        assert registry.lookup("github").client_id == "github-client-id"

    def test_lookup_unknown_raises(self, registry):
        with pytest.raises(UnknownProviderError) as exc_info:
            registry.lookup("facebook")
        assert exc_info.value.code == "unknown_provider"
        assert exc_info.value.status_code == 400

    def test_container_protocol(self, registry):
        assert "google" in registry
        assert "facebook" not in registry
        assert len(registry) == 2
        assert set(registry.provider_ids) == {"google", "github"}
        assert {c.provider_id for c in registry} == {"google", "github"}

    def test_unusable_config_fails_at_construction(self):
        with pytest.raises(UnconfiguredProviderError):
            ProviderRegistry([google_config(client_id="")])

    def test_duplicate_provider_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            ProviderRegistry([google_config(), google_config()])


class TestRegistryFromSettings:
    def test_builds_configured_providers(self):
        settings = OAuthSettings(
            _env_file=None,
            GOOGLE_CLIENT_ID="gid",
            GOOGLE_CLIENT_SECRET="gsecret",
            GOOGLE_REDIRECT_URI="http://localhost/cb/google",
        )
        registry = ProviderRegistry.from_settings(settings)
        assert registry.provider_ids == ("google",)
        assert registry.lookup("google").redirect_uri == "http://localhost/cb/google"

    def test_partial_provider_fails_at_startup(self):
        settings = OAuthSettings(_env_file=None, GITHUB_CLIENT_ID="ghid")
        with pytest.raises(UnconfiguredProviderError) as exc_info:
            ProviderRegistry.from_settings(settings)
        assert exc_info.value.missing == ("GITHUB_CLIENT_SECRET", "GITHUB_REDIRECT_URI")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_CLIENT_ID", "ghid")
        monkeypatch.setenv("GITHUB_CLIENT_SECRET", "ghsecret")
        monkeypatch.setenv("GITHUB_REDIRECT_URI", "http://localhost/cb/github")
        for name in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REDIRECT_URI"):
            monkeypatch.delenv(name, raising=False)

        registry = ProviderRegistry.from_env(env_file=None)
        assert registry.provider_ids == ("github",)
        assert registry.lookup("github").client_secret == "ghsecret"

    def test_no_providers_configured_gives_empty_registry(self, monkeypatch):
        for prefix in ("GOOGLE", "GITHUB"):
            for suffix in ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI"):
                monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)
        registry = ProviderRegistry.from_env(env_file=None)
        assert len(registry) == 0

    def test_extra_variant_read_from_its_env_prefix(self, monkeypatch):
        monkeypatch.setenv("GITLAB_CLIENT_ID", "glid")
        monkeypatch.setenv("GITLAB_CLIENT_SECRET", "glsecret")
        monkeypatch.setenv("GITLAB_REDIRECT_URI", "http://localhost/cb/gitlab")
        for prefix in ("GOOGLE", "GITHUB"):
            for suffix in ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI"):
                monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)

        variants = build_variant_table([GoogleProvider(), GitHubProvider(), GitLabProvider()])
        registry = ProviderRegistry.from_env(env_file=None, variants=variants)

        assert registry.provider_ids == ("gitlab",)
        config = registry.lookup("gitlab")
        assert config.client_secret == "glsecret"
        assert config.token_url == "https://gitlab.com/oauth/token"

    def test_extra_variant_partially_configured_fails(self, monkeypatch):
        monkeypatch.setenv("GITLAB_CLIENT_ID", "glid")
        for suffix in ("CLIENT_SECRET", "REDIRECT_URI"):
            monkeypatch.delenv(f"GITLAB_{suffix}", raising=False)

        with pytest.raises(UnconfiguredProviderError) as exc_info:
            ProviderRegistry.from_env(env_file=None, variants=build_variant_table([GitLabProvider()]))
        assert exc_info.value.missing == ("GITLAB_CLIENT_SECRET", "GITLAB_REDIRECT_URI")
