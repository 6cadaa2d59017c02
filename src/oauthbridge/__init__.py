"""oauthbridge: provider-abstracted OAuth 2.0 login for Python applications."""

__version__ = "0.1.0"

from oauthbridge.config import OAuthBridgeConfig, OAuthSettings, ProviderConfig
from oauthbridge.core.crypto import PKCEPair, new_nonce, new_pkce_pair, new_state
from oauthbridge.core.errors import (
    AuthError,
    ExchangeError,
    InvalidRedirectError,
    ProfileFetchError,
    ProfileNormalizationError,
    RefreshError,
    StateMismatchError,
    UnconfiguredProviderError,
    UnknownProviderError,
    UnsupportedProviderError,
)
from oauthbridge.core.schemas import (
    AuthorizationAttempt,
    LoginResult,
    LoginStart,
    NormalizedIdentity,
    PartialTokenSet,
    TokenSet,
)
from oauthbridge.oauthbridge import OAuthBridge
from oauthbridge.providers import GitHubProvider, GoogleProvider, ProviderVariant
from oauthbridge.registry import ProviderRegistry
from oauthbridge.store import AttemptStore, InMemoryAttemptStore

__all__ = [
    "AttemptStore",
    "AuthError",
    "AuthorizationAttempt",
    "ExchangeError",
    "GitHubProvider",
    "GoogleProvider",
    "InMemoryAttemptStore",
    "InvalidRedirectError",
    "LoginResult",
    "LoginStart",
    "NormalizedIdentity",
    "OAuthBridge",
    "OAuthBridgeConfig",
    "OAuthSettings",
    "PKCEPair",
    "PartialTokenSet",
    "ProfileFetchError",
    "ProfileNormalizationError",
    "ProviderConfig",
    "ProviderRegistry",
    "ProviderVariant",
    "RefreshError",
    "StateMismatchError",
    "TokenSet",
    "UnconfiguredProviderError",
    "UnknownProviderError",
    "UnsupportedProviderError",
    "new_nonce",
    "new_pkce_pair",
    "new_state",
]
