"""Data records passed between the OAuth components and back to the caller."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AuthorizationAttempt:
    """One login attempt, held by the caller's short-lived store keyed by ``state``.

    Must be consumed exactly once on the matching callback.
    """

    provider_id: str
    state: str
    nonce: str
    redirect_path: str = "/"
    code_verifier: str | None = field(default=None, repr=False)
    created_at: float = field(default_factory=time.time)

    def is_expired(self, ttl_seconds: float, now: float | None = None) -> bool:
        if now is None:
            now = time.time()
        return now - self.created_at > ttl_seconds


@dataclass(frozen=True, slots=True)
class TokenSet:
    """Tokens returned by the authorization code exchange."""

    access_token: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)
    expires_in: int | None = None
    token_type: str | None = None
    scope: str | None = None
    id_token: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class PartialTokenSet:
    """Tokens returned by a refresh grant. Refresh token rotation is optional."""

    access_token: str = field(repr=False)
    expires_in: int | None = None
    refresh_token: str | None = field(default=None, repr=False)
    token_type: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedIdentity:
    """Provider-independent user identity.

    ``provider_id`` is only unique within ``provider``; link accounts on the
    ``(provider, provider_id)`` pair.
    """

    provider: str
    provider_id: str
    email: str
    email_verified: bool
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    profile_picture_url: str = ""
    raw_profile: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class LoginStart:
    """Result of starting a login: where to send the browser and what to store."""

    authorization_url: str
    attempt: AuthorizationAttempt


@dataclass(frozen=True, slots=True)
class LoginResult:
    """Result of a completed login."""

    identity: NormalizedIdentity
    tokens: TokenSet
    redirect_path: str = "/"
