# Order Models
# Order records from the record store and the tracking facts derived from them

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from utils.dates import isoformat_utc, parse_timestamp


def _first(value: Any) -> Any:
    """Lookup/rollup fields come back as arrays; take the first element."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _text(value: Any) -> Optional[str]:
    value = _first(value)
    if value is None or value == "":
        return None
    return str(value)


def _float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Numeric field value, or default for blanks and formula errors ({"specialValue": "NaN"}, {"error": ...})."""
    value = _first(value)
    if value is None or isinstance(value, (bool, dict)):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _int(value: Any, default: Optional[int] = None) -> Optional[int]:
    number = _float(value)
    return default if number is None else int(number)


class CancelEligibility(Enum):
    """Whether an order can still be safely cancelled."""

    CAN_CANCEL = "Can Cancel"
    CHECK_SUPPLIER = "Check Supplier"
    CANNOT_CANCEL = "Cannot Cancel"


@dataclass
class OrderInfo:
    """An order as stored in the Orders table."""

    record_id: str
    order_id: str = ""
    platform_order_number: str = ""
    item_name: str = ""
    sku: str = ""
    quantity: int = 1
    sales_amount: float = 0.0
    order_date: str = ""
    recipient_name: str = ""
    recipient_address: str = ""
    recipient_phone: Optional[str] = None
    status: str = ""
    store_code: Optional[str] = None
    ship_date: Optional[str] = None
    latest_ship_date: Optional[str] = None
    # Tracking
    carrier_tracking_number: Optional[str] = None  # usable with the tracking provider
    marketplace_tracking_number: Optional[str] = None  # what the customer sees
    tracking_carrier: Optional[str] = None
    tracking_status: Optional[str] = None
    tracking_detail_status: Optional[str] = None
    tracking_last_update: Optional[str] = None
    expected_delivery: Optional[str] = None
    actual_delivery: Optional[str] = None
    # Processing status
    platform_order_status: Optional[str] = None
    fulfillment_status: Optional[str] = None
    shipper_fulfillment_status: Optional[str] = None
    supplier_order_number: Optional[str] = None
    shipment_dropped: bool = False
    # Links
    walmart_product_id: Optional[str] = None
    supplier_link: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "OrderInfo":
        f = record.get("fields", {}) or {}
        return cls(
            record_id=record.get("id", ""),
            order_id=_text(f.get("Order ID_")) or "",
            platform_order_number=_text(f.get("Platform Order Number (from 4Seller)")) or "",
            item_name=_text(f.get("Item Name_f")) or "",
            sku=_text(f.get("SKU_f")) or "",
            quantity=_int(f.get("Quantity (from 4Seller)"), 1),
            sales_amount=_float(f.get("Sales Amt"), 0.0),
            order_date=_text(f.get("Order Date")) or "",
            recipient_name=_text(f.get("Recipient Name_f")) or "",
            recipient_address=_text(f.get("Recipient Full Address_f")) or "",
            recipient_phone=_text(f.get("Recipient Phone Number_f")),
            status=_text(f.get("Status")) or "",
            store_code=_text(f.get("Shop Code_f")),
            ship_date=_text(f.get("Shipper Dropoff Date")),
            latest_ship_date=_text(f.get("Latest Ship Date (from 4Seller)")),
            carrier_tracking_number=_text(f.get("Tracking# (R)")),
            marketplace_tracking_number=_text(f.get("Tracking Number in Marketplace_f")),
            tracking_carrier=_text(f.get("Tracking Carrier for Shipper")),
            tracking_status=_text(f.get("17Track Status")),
            tracking_detail_status=_text(f.get("17Track Detail Status")),
            tracking_last_update=_text(f.get("17Track Latest Event time")),
            expected_delivery=_text(f.get("Latest Delivery Date (from 4Seller)")),
            actual_delivery=_text(f.get("17Track Delivery Date")),
            platform_order_status=_text(f.get("Platform Order Status (from 4Seller)")),
            fulfillment_status=_text(f.get("Fulfillment Status")),
            shipper_fulfillment_status=_text(f.get("Shipper Fulfilment Status")),
            supplier_order_number=_text(f.get("Supplier Order#")),
            shipment_dropped=bool(_first(f.get("Shipment as Dropped"))),
            walmart_product_id=_text(f.get("HDP Product ID")),
            supplier_link=_text(f.get("Primary Supplier Link (from Linked SKU)")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass(frozen=True)
class OrderTrackingFacts:
    """The tracking-relevant facts of one order, with timestamps parsed."""

    marketplace_tracking_number: Optional[str] = None
    carrier_tracking_number: Optional[str] = None
    supplier_order_number: Optional[str] = None
    shipment_dropped: bool = False
    tracking_status_text: Optional[str] = None
    tracking_detail_status_text: Optional[str] = None
    last_tracking_update_at: Optional[datetime] = None
    expected_delivery_at: Optional[datetime] = None
    actual_delivery_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: OrderInfo) -> "OrderTrackingFacts":
        return cls(
            marketplace_tracking_number=order.marketplace_tracking_number,
            carrier_tracking_number=order.carrier_tracking_number,
            supplier_order_number=order.supplier_order_number,
            shipment_dropped=bool(order.shipment_dropped),
            tracking_status_text=order.tracking_status,
            tracking_detail_status_text=order.tracking_detail_status,
            last_tracking_update_at=parse_timestamp(order.tracking_last_update),
            expected_delivery_at=parse_timestamp(order.expected_delivery),
            actual_delivery_at=parse_timestamp(order.actual_delivery),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marketplace_tracking_number": self.marketplace_tracking_number,
            "carrier_tracking_number": self.carrier_tracking_number,
            "supplier_order_number": self.supplier_order_number,
            "shipment_dropped": self.shipment_dropped,
            "tracking_status_text": self.tracking_status_text,
            "tracking_detail_status_text": self.tracking_detail_status_text,
            "last_tracking_update_at": isoformat_utc(self.last_tracking_update_at),
            "expected_delivery_at": isoformat_utc(self.expected_delivery_at),
            "actual_delivery_at": isoformat_utc(self.actual_delivery_at),
        }


@dataclass
class OrderReconciliation:
    """Derived tracking state for one order, recomputed on every read."""

    has_marketplace_tracking: bool
    has_carrier_tracking: bool
    tracking_mismatch: bool
    upload_gap: bool
    canonical_customer_tracking_number: Optional[str]
    is_stale: bool
    is_delivered: bool
    display_status_text: Optional[str] = None
    display_detail_status_text: Optional[str] = None
    display_events: List[Any] = field(default_factory=list)
    last_update_at: Optional[datetime] = None
    days_since_update: Optional[int] = None
    live: bool = False

    @property
    def has_any_tracking(self) -> bool:
        return self.has_marketplace_tracking or self.has_carrier_tracking

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_marketplace_tracking": self.has_marketplace_tracking,
            "has_carrier_tracking": self.has_carrier_tracking,
            "tracking_mismatch": self.tracking_mismatch,
            "upload_gap": self.upload_gap,
            "canonical_customer_tracking_number": self.canonical_customer_tracking_number,
            "is_stale": self.is_stale,
            "is_delivered": self.is_delivered,
            "display_status_text": self.display_status_text,
            "display_detail_status_text": self.display_detail_status_text,
            "display_events": [e.to_dict() for e in self.display_events],
            "last_update_at": isoformat_utc(self.last_update_at),
            "days_since_update": self.days_since_update,
            "live": self.live,
        }
