"""Wire format of the ``state`` query parameter.

The parameter carries both the random state token and the post-login redirect
path, so the callback can recover the destination without a session lookup.
Without a secret it is compact JSON. With a secret it is an HS256 JWT, which
protects the redirect path from tampering during the provider round-trip.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from oauthbridge.core.errors import StateMismatchError

STATE_ALGORITHM = "HS256"
_STATE_TYP = "oauth_state"


@dataclass(frozen=True, slots=True)
class StatePayload:
    """Decoded state parameter."""

    state: str
    redirect_path: str = "/"


class StateCodec:
    """Encode and decode the structured ``state`` parameter.

    Args:
        secret: HMAC key for signed state. None keeps the plain JSON format.
        ttl_seconds: Lifetime of signed state tokens.
    """

    def __init__(self, secret: str | None = None, *, ttl_seconds: int = 600) -> None:
        self._secret = secret
        self._ttl_seconds = ttl_seconds

    @property
    def signed(self) -> bool:
        return self._secret is not None

    def encode(self, state: str, redirect_path: str = "/") -> str:
        if self._secret is None:
            return json.dumps({"state": state, "redirectPath": redirect_path}, separators=(",", ":"))

        now = datetime.now(UTC)
        payload = {
            "typ": _STATE_TYP,
            "state": state,
            "rdp": redirect_path,
            "iat": now,
            "exp": now + timedelta(seconds=self._ttl_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=STATE_ALGORITHM)

    def decode(self, param: str | None) -> StatePayload:
        """Decode a received state parameter.

        Raises:
            StateMismatchError: If the parameter is missing, malformed,
                badly signed, or expired.
        """
        if not param:
            raise StateMismatchError("Missing OAuth state")

        if self._secret is not None:
            return self._decode_signed(param)

        try:
            data = json.loads(param)
        except ValueError:
            raise StateMismatchError("Invalid OAuth state")

        if not isinstance(data, dict) or not isinstance(data.get("state"), str):
            raise StateMismatchError("Invalid OAuth state")

        redirect_path = data.get("redirectPath")
        if not isinstance(redirect_path, str) or not redirect_path:
            redirect_path = "/"
        return StatePayload(state=data["state"], redirect_path=redirect_path)

    def _decode_signed(self, param: str) -> StatePayload:
        try:
            payload = jwt.decode(param, self._secret, algorithms=[STATE_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise StateMismatchError("OAuth state expired")
        except jwt.InvalidTokenError:
            raise StateMismatchError("Invalid OAuth state")

        if payload.get("typ") != _STATE_TYP or not isinstance(payload.get("state"), str):
            raise StateMismatchError("Invalid OAuth state")

        return StatePayload(state=payload["state"], redirect_path=payload.get("rdp") or "/")
