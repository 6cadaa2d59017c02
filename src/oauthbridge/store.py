"""Authorization attempt storage with single-use, expiring entries."""

import threading
import time
from typing import Callable, Protocol, runtime_checkable

from oauthbridge.core.schemas import AuthorizationAttempt


@runtime_checkable
class AttemptStore(Protocol):
    """Protocol for authorization attempt storage backends.

    ``pop`` must remove the attempt, so a replayed callback finds nothing.
    """

    def save(self, attempt: AuthorizationAttempt) -> None:
        ...

    def pop(self, state: str) -> AuthorizationAttempt | None:
        ...


class InMemoryAttemptStore:
    """Thread-safe in-memory attempt store keyed by state token.

    Suitable for single-process deployments. Multi-process deployments need a
    shared backend (e.g. Redis with a key TTL) implementing AttemptStore.
    """

    def __init__(self, ttl_seconds: float = 600, time_func: Callable[[], float] | None = None) -> None:
        self._ttl_seconds = ttl_seconds
        self._time_func = time_func or time.time
        self._attempts: dict[str, AuthorizationAttempt] = {}
        self._lock = threading.Lock()

    def save(self, attempt: AuthorizationAttempt) -> None:
        with self._lock:
            self._prune()
            self._attempts[attempt.state] = attempt

    def pop(self, state: str) -> AuthorizationAttempt | None:
        with self._lock:
            attempt = self._attempts.pop(state, None)
        if attempt is None or attempt.is_expired(self._ttl_seconds, now=self._time_func()):
            return None
        return attempt

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._attempts)

    def _prune(self) -> None:
        now = self._time_func()
        stale = [k for k, a in self._attempts.items() if a.is_expired(self._ttl_seconds, now=now)]
        for k in stale:
            del self._attempts[k]
