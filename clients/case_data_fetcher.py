# CaseDataFetcher
# Fetches cases, orders, stores and playbooks from the record store and maps them to models.
# Enrichment lookups degrade to None / [] on store failure; primary reads and writes propagate.

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from clients import formula as fx
from clients.record_store import AirtableRecordStore
from config import (
    CASES_TABLE,
    ORDERS_TABLE,
    STORES_TABLE,
    PLAYBOOK_TABLE,
    ORDER_SEARCH_DEFAULT_DAYS,
    ORDER_SEARCH_MAX_RECORDS,
)
from errors import RecordStoreError
from models.case import CASE_FIELD_NAMES, CSCase, Playbook, Store
from models.order import OrderInfo
from utils.logger import log_error, logger
from utils.validation import sanitize_status


CASE_SORT = [{"field": "Platform Order Number", "direction": "desc"}]
ORDER_SORT = [{"field": "Order Date", "direction": "desc"}]


class CaseDataFetcher:
    """
    Domain-level access to the record store.

    Tables:
    - CS Cases
    - Orders
    - Store
    - CS Playbook
    """

    def __init__(self, record_store: AirtableRecordStore):
        self.store = record_store

    # ============ Cases ============

    def get_case(self, case_id: str) -> Optional[CSCase]:
        record = self.store.find(CASES_TABLE, case_id)
        return CSCase.from_record(record) if record else None

    def list_cases(self, status: Optional[str] = None) -> List[CSCase]:
        """List cases, optionally filtered by a whitelisted status. Unknown statuses are ignored."""
        valid_status = sanitize_status(status)
        formula = fx.eq(fx.Field("Status"), fx.Value(valid_status)) if valid_status else None
        records = self.store.query(CASES_TABLE, formula=formula, sort=CASE_SORT)
        return [CSCase.from_record(r) for r in records]

    def get_cases_by_customer_email(self, email: str, exclude_case_id: str = None) -> List[CSCase]:
        try:
            records = self.store.query(
                CASES_TABLE,
                formula=fx.eq(fx.Field("Customer Email"), fx.Value(email)),
                sort=CASE_SORT,
            )
        except RecordStoreError as e:
            log_error("Customer case history unavailable", e)
            return []
        cases = [CSCase.from_record(r) for r in records]
        if exclude_case_id:
            cases = [c for c in cases if c.id != exclude_case_id]
        return cases

    def create_case(self, fields: Dict[str, Any]) -> CSCase:
        """
        Create a case from attribute-name keyed fields.

        Empty values are dropped; status defaults to 'New'.
        """
        payload = {"Status": "New"}
        for attr, value in fields.items():
            name = CASE_FIELD_NAMES.get(attr)
            if name and value not in (None, ""):
                payload[name] = value
        record = self.store.create(CASES_TABLE, payload)
        return CSCase.from_record(record)

    def update_case(self, case_id: str, updates: Dict[str, Any]) -> CSCase:
        """Update a case. Unknown attributes and None values are ignored."""
        payload = {}
        for attr, value in updates.items():
            name = CASE_FIELD_NAMES.get(attr)
            if name and value is not None:
                payload[name] = value
        record = self.store.update(CASES_TABLE, case_id, payload)
        return CSCase.from_record(record)

    # ============ Orders ============

    def get_order_by_platform_number(self, platform_order_number: str) -> Optional[OrderInfo]:
        """
        Find the order for a case.

        The platform order number is a linked (array) field, so match with SEARCH
        over the joined values as well as the plain order ID.
        """
        needle = fx.Value(platform_order_number)
        formula = fx.or_(
            fx.search(needle, fx.array_join(fx.Field("Platform Order Number (from 4Seller)"))),
            fx.search(needle, fx.array_join(fx.Field("Order Number (from 4Seller)"))),
            fx.eq(fx.Field("Order ID_"), needle),
        )
        try:
            records = self.store.query(ORDERS_TABLE, formula=formula, limit=1)
        except RecordStoreError as e:
            log_error(f"Order lookup failed for {platform_order_number}", e)
            return None
        if not records:
            logger.info(f"📭 No order found for {platform_order_number}")
            return None
        return OrderInfo.from_record(records[0])

    def get_orders_by_customer_email(self, email: str) -> List[OrderInfo]:
        try:
            records = self.store.query(
                ORDERS_TABLE,
                formula=fx.eq(fx.Field("Recipient Email_f"), fx.Value(email)),
                sort=ORDER_SORT,
            )
        except RecordStoreError as e:
            log_error("Customer order history unavailable", e)
            return []
        return [OrderInfo.from_record(r) for r in records]

    def search_orders_by_customer_name(
        self,
        first_name: str,
        last_name: str,
        store_code: Optional[str] = None,
        days_back: int = ORDER_SEARCH_DEFAULT_DAYS,
        today: Optional[date] = None,
    ) -> List[OrderInfo]:
        """Case-insensitive name match over recent orders, optionally within one store."""
        cutoff = (today or date.today()) - timedelta(days=days_back)
        conditions = [
            fx.search(
                fx.Value(first_name.strip().lower()),
                fx.lower(fx.array_join(fx.Field("Recipient First Name_f"))),
            ),
            fx.search(
                fx.Value(last_name.strip().lower()),
                fx.lower(fx.array_join(fx.Field("Recipient Name_f"))),
            ),
        ]
        if store_code:
            conditions.append(fx.eq(fx.Field("Shop Code_f"), fx.Value(store_code)))
        conditions.append(fx.is_after(fx.Field("Order Date"), fx.Value(cutoff.isoformat())))

        try:
            records = self.store.query(
                ORDERS_TABLE,
                formula=fx.and_(*conditions),
                sort=ORDER_SORT,
                limit=ORDER_SEARCH_MAX_RECORDS,
            )
        except RecordStoreError as e:
            log_error("Error searching orders by customer name", e)
            return []
        return [OrderInfo.from_record(r) for r in records]

    # ============ Store ============

    def get_store_by_code(self, store_code: str) -> Optional[Store]:
        try:
            records = self.store.query(
                STORES_TABLE,
                formula=fx.eq(fx.Field("Store Code"), fx.Value(store_code)),
                limit=1,
            )
        except RecordStoreError as e:
            log_error(f"Store lookup failed for {store_code}", e)
            return None
        return Store.from_record(records[0]) if records else None

    # ============ Playbook ============

    def get_playbook_by_category(self, category: str) -> Optional[Playbook]:
        formula = fx.and_(
            fx.eq(fx.Field("Issue Category"), fx.Value(category)),
            fx.eq(fx.Field("Playbook Status"), fx.Value("Active")),
        )
        try:
            records = self.store.query(PLAYBOOK_TABLE, formula=formula, limit=1)
        except RecordStoreError as e:
            log_error(f"Playbook lookup failed for {category}", e)
            return None
        return Playbook.from_record(records[0]) if records else None
