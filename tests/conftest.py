"""Test fixtures for oauthbridge tests.

All tests are network-free. Provider endpoints are mocked with
httpx.MockTransport handlers that record every request they receive.
"""

import urllib.parse
from collections.abc import Callable
from typing import Any, ClassVar

import httpx
import pytest

from oauthbridge import OAuthBridge, OAuthBridgeConfig, ProviderRegistry
from oauthbridge.config import ProviderConfig
from oauthbridge.core.http import HTTPClientFactory
from oauthbridge.core.schemas import NormalizedIdentity
from oauthbridge.providers import GitHubProvider, GoogleProvider, ProviderVariant, build_variant_table

GOOGLE_REDIRECT = "http://localhost/auth/oauth/google/callback"
GITHUB_REDIRECT = "http://localhost/auth/oauth/github/callback"


class GitLabProvider(ProviderVariant):
    """A third provider, defined outside the package."""

    name: ClassVar[str] = "gitlab"
    AUTHORIZE_URL: ClassVar[str] = "https://gitlab.com/oauth/authorize"
    TOKEN_URL: ClassVar[str] = "https://gitlab.com/oauth/token"
    USERINFO_URL: ClassVar[str] = "https://gitlab.com/api/v4/user"
    SCOPES: ClassVar[tuple[str, ...]] = ("read_user",)

    def normalize_profile(self, raw_profile: dict[str, Any]) -> NormalizedIdentity:
        return NormalizedIdentity(
            provider=self.name,
            provider_id=str(raw_profile["id"]),
            email=raw_profile.get("email") or "",
            email_verified=raw_profile.get("confirmed_at") is not None,
            display_name=raw_profile.get("username") or "",
            raw_profile=raw_profile,
        )


def google_config(**overrides) -> ProviderConfig:
    kwargs = {
        "client_id": "google-client-id",
        "client_secret": "google-client-secret",
        "redirect_uri": GOOGLE_REDIRECT,
    }
    kwargs.update(overrides)
    return GoogleProvider().make_config(**kwargs)


def github_config(**overrides) -> ProviderConfig:
    kwargs = {
        "client_id": "github-client-id",
        "client_secret": "github-client-secret",
        "redirect_uri": GITHUB_REDIRECT,
    }
    kwargs.update(overrides)
    return GitHubProvider().make_config(**kwargs)


def make_mock_transport(
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Wrap a handler in a MockTransport that records requests."""
    captured: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return handler(request)

    return httpx.MockTransport(recording_handler), captured


def form_data(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    return dict(urllib.parse.parse_qsl(request.content.decode("utf-8")))


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry([google_config(), github_config()])


@pytest.fixture
def variants():
    return build_variant_table()


@pytest.fixture
def http_factory():
    """Factory for an HTTPClientFactory bound to a mock transport."""

    def _factory(transport: httpx.MockTransport) -> HTTPClientFactory:
        return HTTPClientFactory(timeout=5.0, transport=transport)

    return _factory


@pytest.fixture
def make_bridge(registry):
    """Factory for an OAuthBridge wired to a mock transport."""

    def _make(transport: httpx.MockTransport | None = None, **config_kwargs) -> OAuthBridge:
        return OAuthBridge(
            registry,
            config=OAuthBridgeConfig(**config_kwargs),
            transport=transport,
        )

    return _make
