# Case Dashboard Data Models

from models.tracking import TrackingStatus, TrackingEvent, TrackingSnapshot, ProviderRejected
from models.order import OrderInfo, OrderTrackingFacts, OrderReconciliation, CancelEligibility
from models.case import CSCase, Store, Playbook, CaseAgingFacts, CaseSummary

__all__ = [
    "TrackingStatus",
    "TrackingEvent",
    "TrackingSnapshot",
    "ProviderRejected",
    "OrderInfo",
    "OrderTrackingFacts",
    "OrderReconciliation",
    "CancelEligibility",
    "CSCase",
    "Store",
    "Playbook",
    "CaseAgingFacts",
    "CaseSummary",
]
