"""Tests for TrackingRefreshCoordinator."""

import threading

from orchestrator.refresh_coordinator import TrackingRefreshCoordinator, session_coordinator


class TestRefreshCoordinator:
    """Only the most recently begun refresh for an order may apply."""

    def test_single_refresh_applies(self):
        coordinator = TrackingRefreshCoordinator()
        token = coordinator.begin("PO-1001")

        assert coordinator.complete("PO-1001", token, "fresh") is True
        assert coordinator.latest_result("PO-1001") == "fresh"

    def test_older_response_arriving_last_is_discarded(self):
        coordinator = TrackingRefreshCoordinator()
        first = coordinator.begin("PO-1001")
        second = coordinator.begin("PO-1001")

        assert coordinator.complete("PO-1001", second, "newer") is True
        assert coordinator.complete("PO-1001", first, "older") is False
        assert coordinator.latest_result("PO-1001") == "newer"

    def test_older_response_arriving_first_is_discarded(self):
        coordinator = TrackingRefreshCoordinator()
        first = coordinator.begin("PO-1001")
        second = coordinator.begin("PO-1001")

        assert coordinator.complete("PO-1001", first, "older") is False
        assert coordinator.latest_result("PO-1001") is None
        assert coordinator.complete("PO-1001", second, "newer") is True

    def test_cancel_discards_in_flight_refresh(self):
        coordinator = TrackingRefreshCoordinator()
        token = coordinator.begin("PO-1001")

        coordinator.cancel("PO-1001")

        assert coordinator.is_current("PO-1001", token) is False
        assert coordinator.complete("PO-1001", token, "late") is False

    def test_cancel_forgets_applied_result(self):
        coordinator = TrackingRefreshCoordinator()
        coordinator.complete("PO-1001", coordinator.begin("PO-1001"), "fresh")

        coordinator.cancel("PO-1001")

        assert coordinator.latest_result("PO-1001") is None

    def test_orders_are_independent(self):
        coordinator = TrackingRefreshCoordinator()
        a = coordinator.begin("PO-1001")
        b = coordinator.begin("PO-2002")

        assert coordinator.complete("PO-2002", b, "b") is True
        assert coordinator.complete("PO-1001", a, "a") is True

    def test_run_returns_none_when_superseded(self):
        coordinator = TrackingRefreshCoordinator()
        started = threading.Event()
        release = threading.Event()
        results = {}

        def slow_refresh():
            started.set()
            release.wait(timeout=5)
            return "slow"

        worker = threading.Thread(target=lambda: results.update(slow=coordinator.run("PO-1001", slow_refresh)))
        worker.start()
        started.wait(timeout=5)

        results["fast"] = coordinator.run("PO-1001", lambda: "fast")
        release.set()
        worker.join(timeout=5)

        assert results == {"fast": "fast", "slow": None}
        assert coordinator.latest_result("PO-1001") == "fast"


class TestSessionCoordinator:
    """Each UI session owns its coordinator."""

    def test_created_once_per_session(self):
        session = {}

        assert session_coordinator(session) is session_coordinator(session)

    def test_other_session_cannot_discard_a_refresh(self):
        session_a, session_b = {}, {}
        token_a = session_coordinator(session_a).begin("PO-1001")

        session_coordinator(session_b).cancel("PO-1001")
        session_coordinator(session_b).begin("PO-1001")

        assert session_coordinator(session_a).complete("PO-1001", token_a, "a") is True
