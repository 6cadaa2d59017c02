"""Random artifacts for the authorization code flow: state, nonce, PKCE."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass

PKCE_METHOD = "S256"


@dataclass(frozen=True, slots=True)
class PKCEPair:
    """PKCE code_verifier with its derived S256 code_challenge."""

    code_verifier: str
    code_challenge: str
    method: str = PKCE_METHOD


def new_state() -> str:
    """256-bit anti-forgery token, hex encoded (64 chars)."""
    return secrets.token_hex(32)


def new_nonce() -> str:
    """128-bit replay-resistance token, hex encoded (32 chars)."""
    return secrets.token_hex(16)


def pkce_challenge(code_verifier: str) -> str:
    """Derive the S256 code_challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def new_pkce_pair() -> PKCEPair:
    """Generate a PKCE verifier/challenge pair.

    The verifier is 32 random bytes, url-safe encoded to 43 chars, the
    minimum length RFC 7636 allows.
    """
    code_verifier = secrets.token_urlsafe(32)
    return PKCEPair(code_verifier=code_verifier, code_challenge=pkce_challenge(code_verifier))


def states_match(received: str | None, stored: str | None) -> bool:
    """Constant-time comparison of a received state token against the stored one."""
    if not received or not stored:
        return False
    return hmac.compare_digest(received.encode("utf-8"), stored.encode("utf-8"))
