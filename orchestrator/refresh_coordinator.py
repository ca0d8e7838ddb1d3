# TrackingRefreshCoordinator
# Decides whether a finished live tracking refresh may still be applied.
# Results are discarded by request identity: only the most recently begun request
# for an order may apply, no matter which response arrives first.
# One coordinator per UI session; sessions never invalidate each other's refreshes.

import itertools
import threading
from typing import Any, Callable, Dict, MutableMapping, Optional


class TrackingRefreshCoordinator:
    """
    Usage:
        token = coordinator.begin(order_key)
        result = ...slow lookup...
        if coordinator.complete(order_key, token, result):
            show(result)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest: Dict[str, int] = {}
        self._results: Dict[str, Any] = {}

    def begin(self, order_key: str) -> int:
        """Start a refresh for an order. Any earlier in-flight refresh for it becomes stale."""
        with self._lock:
            token = next(self._counter)
            self._latest[order_key] = token
            return token

    def cancel(self, order_key: str) -> None:
        """Invalidate every in-flight refresh for an order (e.g. the user navigated away)."""
        with self._lock:
            self._latest.pop(order_key, None)
            self._results.pop(order_key, None)

    def is_current(self, order_key: str, token: int) -> bool:
        with self._lock:
            return self._latest.get(order_key) == token

    def complete(self, order_key: str, token: int, result: Any) -> bool:
        """
        Record a finished refresh.

        Returns:
            True if the result was applied, False if it was stale and discarded.
        """
        with self._lock:
            if self._latest.get(order_key) != token:
                return False
            self._results[order_key] = result
            return True

    def latest_result(self, order_key: str) -> Optional[Any]:
        with self._lock:
            return self._results.get(order_key)

    def run(self, order_key: str, refresh: Callable[[], Any]) -> Optional[Any]:
        """Begin, run and complete one refresh. Returns the result, or None if it went stale."""
        token = self.begin(order_key)
        result = refresh()
        return result if self.complete(order_key, token, result) else None


SESSION_KEY = "tracking_refresh_coordinator"


def session_coordinator(session: MutableMapping[str, Any]) -> TrackingRefreshCoordinator:
    """The coordinator owned by one UI session (e.g. st.session_state), created on first use."""
    coordinator = session.get(SESSION_KEY)
    if coordinator is None:
        coordinator = TrackingRefreshCoordinator()
        session[SESSION_KEY] = coordinator
    return coordinator
