"""Tests for the cancelability classifier."""

import pytest

from agents.cancelability_classifier import cancel_guidance, classify_cancelability
from models.order import CancelEligibility, OrderTrackingFacts


def facts(supplier=None, dropped=False, carrier=None):
    return OrderTrackingFacts(
        supplier_order_number=supplier,
        shipment_dropped=dropped,
        carrier_tracking_number=carrier,
    )


class TestClassifyCancelability:
    """The classifier is total over all eight combinations."""

    @pytest.mark.parametrize("supplier,dropped,carrier,expected", [
        (None, False, None, CancelEligibility.CAN_CANCEL),
        ("SUP1", False, None, CancelEligibility.CHECK_SUPPLIER),
        (None, True, None, CancelEligibility.CANNOT_CANCEL),
        ("SUP1", True, None, CancelEligibility.CANNOT_CANCEL),
        (None, False, "1Z999", CancelEligibility.CANNOT_CANCEL),
        ("SUP1", False, "1Z999", CancelEligibility.CANNOT_CANCEL),
        (None, True, "1Z999", CancelEligibility.CANNOT_CANCEL),
        ("SUP1", True, "1Z999", CancelEligibility.CANNOT_CANCEL),
    ])
    def test_all_combinations(self, supplier, dropped, carrier, expected):
        assert classify_cancelability(facts(supplier, dropped, carrier)) == expected

    def test_supplier_order_only_needs_supplier_check(self):
        assert classify_cancelability(facts(supplier="SUP1")) == CancelEligibility.CHECK_SUPPLIER

    def test_empty_strings_count_as_absent(self):
        assert classify_cancelability(facts(supplier="", carrier="")) == CancelEligibility.CAN_CANCEL


class TestCancelGuidance:
    """Notes shown next to the cancel badge."""

    def test_dropped_without_carrier_number_is_flagged(self):
        notes = cancel_guidance(facts(dropped=True))

        assert any("no carrier tracking number" in n for n in notes)

    def test_supplier_note(self):
        notes = cancel_guidance(facts(supplier="SUP1"))

        assert notes == ["Supplier order SUP1 placed, confirm with supplier before cancelling"]

    def test_nothing_yet(self):
        assert cancel_guidance(facts()) == ["No supplier order or shipment yet, safe to cancel"]
