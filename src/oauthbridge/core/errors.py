"""OAuth error taxonomy.

Every error carries a machine-readable ``code`` and a suggested HTTP status so
the surrounding router can map it to a response without inspecting types.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base auth error with an error code and HTTP status."""

    def __init__(self, message: str, code: str, status_code: int = 400, **extra):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.extra = extra
        super().__init__(message)


class UnknownProviderError(AuthError):
    """The provider id is not present in the registry."""

    def __init__(self, provider_id: str):
        super().__init__(
            f"Provider '{provider_id}' is not configured",
            code="unknown_provider",
            status_code=400,
        )
        self.provider_id = provider_id


class UnconfiguredProviderError(AuthError):
    """A provider is registered but missing required configuration values."""

    def __init__(self, provider_id: str, missing: list[str] | tuple[str, ...]):
        super().__init__(
            f"Provider '{provider_id}' is missing required configuration: {', '.join(missing)}",
            code="provider_unconfigured",
            status_code=500,
        )
        self.provider_id = provider_id
        self.missing = tuple(missing)


class UnsupportedProviderError(AuthError):
    """No provider variant is registered for the given id."""

    def __init__(self, provider_id: str):
        super().__init__(
            f"Unsupported provider: {provider_id}",
            code="unsupported_provider",
            status_code=500,
        )
        self.provider_id = provider_id


class StateMismatchError(AuthError):
    """The callback state does not match the stored attempt. Possible CSRF."""

    def __init__(self, message: str = "OAuth state mismatch"):
        super().__init__(message, code="oauth_state_mismatch", status_code=400)


class InvalidRedirectError(AuthError):
    """The post-login redirect target is not a relative path."""

    def __init__(self, redirect_path: str):
        super().__init__(
            "redirect_path must be a relative path",
            code="invalid_redirect",
            status_code=400,
        )
        self.redirect_path = redirect_path


class ExchangeError(AuthError):
    """The authorization code could not be exchanged for tokens.

    Codes are single-use, so callers must not retry the exchange.
    """

    def __init__(self, message: str, *, provider_error: str | None = None,
                 upstream_status: int | None = None):
        super().__init__(
            message,
            code="oauth_exchange_failed",
            status_code=400,
            provider_error=provider_error,
            upstream_status=upstream_status,
        )
        self.provider_error = provider_error
        self.upstream_status = upstream_status


class RefreshError(AuthError):
    """The refresh token grant failed.

    ``reauth_required`` is True when the provider rejected the refresh token
    itself; the caller must then force a new login instead of retrying.
    """

    def __init__(self, message: str, *, provider_error: str | None = None,
                 upstream_status: int | None = None):
        super().__init__(
            message,
            code="oauth_refresh_failed",
            status_code=400,
            provider_error=provider_error,
            upstream_status=upstream_status,
        )
        self.provider_error = provider_error
        self.upstream_status = upstream_status

    @property
    def reauth_required(self) -> bool:
        return self.provider_error == "invalid_grant"


class ProfileFetchError(AuthError):
    """The provider profile (or its email list) could not be fetched."""

    def __init__(self, message: str, *, upstream_status: int | None = None):
        super().__init__(
            message,
            code="oauth_user_info_failed",
            status_code=502,
            upstream_status=upstream_status,
        )
        self.upstream_status = upstream_status

    @property
    def retryable(self) -> bool:
        """Transport failures, throttling and provider 5xx are worth retrying."""
        if self.upstream_status is None:
            return True
        return self.upstream_status == 429 or self.upstream_status >= 500


class ProfileNormalizationError(AuthError):
    """A raw profile lacks the provider-scoped subject identifier."""

    def __init__(self, provider_id: str):
        super().__init__(
            f"Could not determine user ID from {provider_id} response",
            code="oauth_no_user_id",
            status_code=400,
        )
        self.provider_id = provider_id
