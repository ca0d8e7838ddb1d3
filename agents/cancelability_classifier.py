# CancelabilityClassifier
# Decides whether an order can still be cancelled from its stored tracking facts.
# Evaluated fresh on every read; nothing is persisted.

from typing import List

from models.order import CancelEligibility, OrderTrackingFacts


def classify_cancelability(facts: OrderTrackingFacts) -> CancelEligibility:
    """
    Shipment dropped or a carrier tracking number each mean the parcel is on its
    way: CANNOT_CANCEL. A supplier order without either needs a check with the
    supplier. Otherwise the order can be cancelled.
    """
    if facts.shipment_dropped or facts.carrier_tracking_number:
        return CancelEligibility.CANNOT_CANCEL
    if facts.supplier_order_number:
        return CancelEligibility.CHECK_SUPPLIER
    return CancelEligibility.CAN_CANCEL


def cancel_guidance(facts: OrderTrackingFacts) -> List[str]:
    """Short notes explaining the eligibility, for the dashboard and the AI prompts."""
    notes = []
    if facts.shipment_dropped:
        notes.append("Shipment has been dropped off with the carrier")
    if facts.carrier_tracking_number:
        notes.append("Carrier tracking number exists, parcel has shipped")
    if facts.supplier_order_number and not (facts.shipment_dropped or facts.carrier_tracking_number):
        notes.append(f"Supplier order {facts.supplier_order_number} placed, confirm with supplier before cancelling")
    if not notes:
        notes.append("No supplier order or shipment yet, safe to cancel")
    if facts.shipment_dropped and not facts.carrier_tracking_number:
        notes.append("Shipment marked dropped but no carrier tracking number on file")
    return notes
