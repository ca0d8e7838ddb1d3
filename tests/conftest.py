# Shared fixtures: fake collaborators and record builders

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from clients import DashboardClients
from errors import GenerationError, RecordStoreError
from models.case import CSCase, Playbook, Store
from models.order import OrderInfo
from models.tracking import ProviderRejected


NOW = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)
CASE_ID = "recAAAAAAAAAAAAAA"
OTHER_CASE_ID = "recBBBBBBBBBBBBBB"


def make_case(**overrides) -> CSCase:
    fields = {
        "id": CASE_ID,
        "platform_order_number": "PO-1001",
        "customer_name": "Jamie Rivera",
        "customer_email": "jamie@example.com",
        "original_message": "Where is my package?",
        "issue_category": "Not Received",
        "sentiment": "Concerned",
        "urgency": "Medium",
        "status": "New",
        "store_code": "ST1",
        "created_time": "2024-06-09T12:00:00.000Z",
    }
    fields.update(overrides)
    return CSCase(**fields)


def make_order(**overrides) -> OrderInfo:
    fields = {
        "record_id": "recORDERAAAAAAAAA",
        "order_id": "PO-1001",
        "platform_order_number": "PO-1001",
        "item_name": "Desk Lamp",
        "sku": "LAMP-01",
        "sales_amount": 24.99,
        "order_date": "2024-06-01",
        "status": "Shipped",
        "recipient_address": "1 Main St",
    }
    fields.update(overrides)
    return OrderInfo(**fields)


class FakeFetcher:
    """In-memory stand-in for CaseDataFetcher."""

    def __init__(self, cases=None, orders=None, stores=None, playbooks=None):
        self.cases: Dict[str, CSCase] = {c.id: c for c in (cases or [])}
        self.orders: Dict[str, OrderInfo] = {o.platform_order_number: o for o in (orders or [])}
        self.stores: Dict[str, Store] = {s.store_code: s for s in (stores or [])}
        self.playbooks: Dict[str, Playbook] = {p.issue_category: p for p in (playbooks or [])}
        self.calls: List[tuple] = []
        self.updates: List[tuple] = []
        self.created: List[Dict[str, Any]] = []
        self.fail_updates = False
        self.fail_get_case = False
        self.search_args: Optional[tuple] = None

    def get_case(self, case_id):
        self.calls.append(("get_case", case_id))
        if self.fail_get_case:
            raise RecordStoreError("find", "boom", 500)
        return self.cases.get(case_id)

    def list_cases(self, status=None):
        self.calls.append(("list_cases", status))
        return [c for c in self.cases.values() if status is None or c.status == status]

    def get_cases_by_customer_email(self, email, exclude_case_id=None):
        self.calls.append(("get_cases_by_customer_email", email))
        return [c for c in self.cases.values() if c.customer_email == email and c.id != exclude_case_id]

    def create_case(self, fields):
        self.created.append(fields)
        return make_case(id="recNEWNEWNEWNEWNE", **{k: v for k, v in fields.items() if v is not None})

    def update_case(self, case_id, updates):
        self.updates.append((case_id, updates))
        if self.fail_updates:
            raise RecordStoreError("update", "boom", 500)
        if case_id not in self.cases:
            raise RecordStoreError("update", "NOT_FOUND", 404)
        case = self.cases[case_id]
        for key, value in updates.items():
            setattr(case, key, value)
        return case

    def get_order_by_platform_number(self, number):
        self.calls.append(("get_order_by_platform_number", number))
        return self.orders.get(number)

    def get_orders_by_customer_email(self, email):
        return []

    def search_orders_by_customer_name(self, first, last, store_code=None, days_back=30, today=None):
        self.search_args = (first, last, store_code, days_back, today)
        return []

    def get_store_by_code(self, code):
        return self.stores.get(code)

    def get_playbook_by_category(self, category):
        return self.playbooks.get(category)


class FakeTracking:
    """Tracking provider fake: lookup results are consumed in order per number."""

    def __init__(self, results=None, register_accepts=True, error=None):
        self.results: Dict[str, list] = {k: list(v) for k, v in (results or {}).items()}
        self.register_accepts = register_accepts
        self.error = error
        self.lookups: List[str] = []
        self.registered: List[str] = []

    def lookup(self, number):
        self.lookups.append(number)
        if self.error is not None:
            raise self.error
        queue = self.results.get(number) or [None]
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def register(self, numbers):
        self.registered.extend(numbers)
        if self.register_accepts:
            return {"accepted": list(numbers), "rejected": []}
        return {
            "accepted": [],
            "rejected": [ProviderRejected(n, "Invalid tracking number") for n in numbers],
        }


class FakeGenerator:
    """Text generator fake returning canned responses and recording prompts."""

    def __init__(self, response="", error=False):
        self.response = response
        self.error = error
        self.prompts: List[Dict[str, Any]] = []

    def generate(self, prompt, system_prompt=None, agent_name="text_generator"):
        self.prompts.append({"prompt": prompt, "system_prompt": system_prompt, "agent_name": agent_name})
        if self.error:
            raise GenerationError("quota exceeded")
        return self.response


@pytest.fixture
def fetcher():
    return FakeFetcher(cases=[make_case()], orders=[make_order()])


@pytest.fixture
def clients(fetcher):
    return DashboardClients(fetcher=fetcher, tracking=FakeTracking(), generator=None)
