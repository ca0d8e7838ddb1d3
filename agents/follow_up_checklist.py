# FollowUpChecklist
# Builds the CS agent's follow-up checklist for a case from its issue category
# and the derived order state (cancel eligibility, upload gap, staleness, delivery).

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models.case import CSCase
from models.order import CancelEligibility, OrderInfo, OrderReconciliation


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    label: str
    description: Optional[str] = None
    priority: str = "medium"  # high | medium | low
    category: str = "action"  # verify | action | communicate | document

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "priority": self.priority,
            "category": self.category,
        }


# Fixed items per issue category
CATEGORY_ITEMS = {
    "Damaged Item": [
        ChecklistItem("request-photos", "Request photos of damaged item", "Ask for photos of item and packaging", "high", "communicate"),
        ChecklistItem("assess-damage", "Assess damage severity from photos", "Determine if partial refund or full replacement needed", "high", "verify"),
        ChecklistItem("offer-resolution", "Offer resolution (refund/replacement/discount)", None, "high", "communicate"),
        ChecklistItem("document-damage", "Document damage in internal notes", "For quality tracking and supplier feedback", "low", "document"),
    ],
    "Wrong Item": [
        ChecklistItem("verify-wrong-item", "Verify what item customer received vs ordered", "Request photos if needed", "high", "verify"),
        ChecklistItem("arrange-return", "Arrange return if required", "Check if return is needed based on item value", "medium", "action"),
        ChecklistItem("send-correct-item", "Arrange to send correct item", None, "high", "action"),
        ChecklistItem("report-fulfillment-error", "Report fulfillment error internally", "For quality improvement tracking", "low", "document"),
    ],
    "Return Request": [
        ChecklistItem("check-return-eligibility", "Check return eligibility", "Review order date and return policy", "high", "verify"),
        ChecklistItem("understand-return-reason", "Understand reason for return", "Ask customer why they want to return", "high", "communicate"),
        ChecklistItem("provide-return-instructions", "Provide return instructions", "Include return address and any labels needed", "medium", "communicate"),
        ChecklistItem("set-refund-expectation", "Set refund timeline expectation", "After item is received and inspected", "medium", "communicate"),
    ],
    "Complaint": [
        ChecklistItem("acknowledge-concern", "Acknowledge customer concern", "Show empathy and understanding", "high", "communicate"),
        ChecklistItem("identify-root-cause", "Identify root cause of complaint", "What went wrong and why", "high", "verify"),
        ChecklistItem("offer-solution", "Offer appropriate solution", "Based on complaint severity", "high", "action"),
        ChecklistItem("consider-escalation", "Consider if escalation is needed", "For serious complaints or repeat issues", "medium", "verify"),
    ],
    "General Question": [
        ChecklistItem("understand-question", "Fully understand customer question", "Ask for clarification if needed", "high", "verify"),
        ChecklistItem("provide-accurate-info", "Provide accurate information", "Check knowledge base if unsure", "high", "communicate"),
        ChecklistItem("offer-additional-help", "Ask if customer needs anything else", None, "low", "communicate"),
    ],
}


def _cancel_items(order: Optional[OrderInfo], eligibility: Optional[CancelEligibility]) -> List[ChecklistItem]:
    items = [ChecklistItem("check-cancel-status", "Check if order can be cancelled", "Review the order processing status", "high", "verify")]
    if eligibility == CancelEligibility.CHECK_SUPPLIER and order is not None:
        items.append(ChecklistItem(
            "contact-supplier-cancel",
            "Contact supplier to request cancellation",
            f"Supplier Order #: {order.supplier_order_number}",
            "high",
            "action",
        ))
    if eligibility == CancelEligibility.CANNOT_CANCEL:
        items.append(ChecklistItem(
            "explain-shipped",
            "Explain to customer that order has shipped",
            "Advise they can refuse delivery or return after receiving",
            "high",
            "communicate",
        ))
    else:
        items.append(ChecklistItem("process-cancel", "Process cancellation in system", None, "high", "action"))
        items.append(ChecklistItem(
            "confirm-refund-timeline",
            "Confirm refund timeline with customer",
            "Usually 3-5 business days after cancellation",
            "medium",
            "communicate",
        ))
    return items


def _tracking_items(order: Optional[OrderInfo], reconciliation: Optional[OrderReconciliation]) -> List[ChecklistItem]:
    items = [ChecklistItem(
        "check-tracking-status",
        "Check 17Track status for actual delivery status",
        "Review the delivery status for discrepancies",
        "high",
        "verify",
    )]
    if reconciliation is not None and reconciliation.upload_gap:
        items.append(ChecklistItem(
            "upload-tracking",
            "Upload tracking number to marketplace",
            "Customer cannot see tracking on the marketplace yet",
            "high",
            "action",
        ))
    if reconciliation is not None and reconciliation.tracking_mismatch:
        items.append(ChecklistItem(
            "resolve-tracking-mismatch",
            "Check why marketplace and carrier tracking differ",
            "Customer may see a different status than the carrier",
            "high",
            "verify",
        ))
    if reconciliation is not None and reconciliation.is_stale:
        items.append(ChecklistItem(
            "check-carrier",
            "Contact carrier for shipment update",
            f"No tracking update for {reconciliation.days_since_update} days",
            "high",
            "action",
        ))
    items.append(ChecklistItem(
        "verify-address",
        "Verify shipping address is correct",
        (order.recipient_address if order else None) or "Check order details",
        "medium",
        "verify",
    ))
    items.append(ChecklistItem(
        "provide-tracking-info",
        "Provide tracking information to customer",
        "Include expected delivery date if available",
        "medium",
        "communicate",
    ))
    if reconciliation is not None and reconciliation.is_delivered:
        items.append(ChecklistItem("check-delivery-location", "Ask customer to check with neighbors/building office", None, "medium", "communicate"))
        items.append(ChecklistItem("file-claim", "Consider filing lost package claim with carrier", None, "low", "action"))
    return items


def build_follow_up_checklist(
    case: CSCase,
    order: Optional[OrderInfo] = None,
    reconciliation: Optional[OrderReconciliation] = None,
    eligibility: Optional[CancelEligibility] = None,
) -> List[ChecklistItem]:
    """
    Args:
        case: The case
        order: The case's order, if found
        reconciliation: Derived tracking state of the order
        eligibility: Cancel eligibility of the order

    Returns:
        Checklist items in display order
    """
    items = [ChecklistItem(
        "verify-order",
        "Verify order details match customer inquiry",
        "Confirm order number, item, and customer name",
        "high",
        "verify",
    )]

    category = case.issue_category
    if category == "Cancel Request":
        items.extend(_cancel_items(order, eligibility))
    elif category in ("Not Received", "Tracking Question"):
        items.extend(_tracking_items(order, reconciliation))
    else:
        items.extend(CATEGORY_ITEMS.get(category, []))

    if category == "Wrong Item" and order is not None:
        items.insert(2, ChecklistItem("check-sku", "Check SKU matches listing", f"SKU: {order.sku or 'N/A'}", "high", "verify"))
    if category == "Damaged Item" and order is not None:
        items.insert(3, ChecklistItem(
            "check-refund-threshold",
            "Check refund threshold for this item",
            f"Order value: ${order.sales_amount:.2f}",
            "medium",
            "verify",
        ))

    if case.urgency == "High":
        items.append(ChecklistItem("prioritize-response", "Prioritize this case - High urgency", "Respond within 2 hours if possible", "high", "action"))
    if case.sentiment == "Frustrated":
        items.append(ChecklistItem(
            "handle-with-care",
            "Handle with extra care - Customer is frustrated",
            "Use empathetic language and offer goodwill gesture if appropriate",
            "high",
            "communicate",
        ))

    items.append(ChecklistItem("update-case-status", "Update case status appropriately", "In Progress, Pending Customer, or Resolved", "medium", "document"))
    items.append(ChecklistItem("add-internal-notes", "Add internal notes", "Document actions taken for future reference", "low", "document"))
    return items
