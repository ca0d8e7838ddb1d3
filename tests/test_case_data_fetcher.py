"""Tests for CaseDataFetcher against a recording record store."""

from datetime import date

import pytest

from clients.case_data_fetcher import CaseDataFetcher
from errors import RecordStoreError


class RecordingStore:
    """Captures queries and returns canned records."""

    def __init__(self, records=None, fail=False):
        self.records = records or []
        self.fail = fail
        self.queries = []
        self.created = []

    def find(self, table, record_id):
        if self.fail:
            raise RecordStoreError("find", "boom", 500)
        return next((r for r in self.records if r["id"] == record_id), None)

    def query(self, table, formula=None, sort=None, limit=None):
        self.queries.append({
            "table": table,
            "formula": formula.render() if formula is not None else None,
            "sort": sort,
            "limit": limit,
        })
        if self.fail:
            raise RecordStoreError("query", "boom", 500)
        return list(self.records)

    def create(self, table, fields):
        self.created.append((table, fields))
        return {"id": "recNEWNEWNEWNEWNE", "createdTime": "2024-06-10T12:00:00.000Z", "fields": fields}

    def update(self, table, record_id, fields):
        return {"id": record_id, "fields": fields}


ORDER_RECORD = {
    "id": "recORDERAAAAAAAAA",
    "fields": {
        "Order ID_": "PO-1001",
        "Platform Order Number (from 4Seller)": ["PO-1001"],
        "Tracking# (R)": ["1Z999"],
        "Tracking Number in Marketplace_f": ["WM123"],
        "Sales Amt": 24.99,
        "Shipment as Dropped": [True],
    },
}


class TestCases:
    def test_get_case_maps_record(self):
        store = RecordingStore([{
            "id": "recAAAAAAAAAAAAAA",
            "createdTime": "2024-06-09T12:00:00.000Z",
            "fields": {"Customer Name": "Jamie Rivera", "Status": "Escalated"},
        }])

        case = CaseDataFetcher(store).get_case("recAAAAAAAAAAAAAA")

        assert case.customer_name == "Jamie Rivera"
        assert case.status == "Escalated"
        assert case.created_time == "2024-06-09T12:00:00.000Z"

    def test_get_case_propagates_store_errors(self):
        with pytest.raises(RecordStoreError):
            CaseDataFetcher(RecordingStore(fail=True)).get_case("recAAAAAAAAAAAAAA")

    def test_list_cases_ignores_unknown_status(self):
        store = RecordingStore()

        CaseDataFetcher(store).list_cases("Deleted')")

        assert store.queries[0]["formula"] is None

    def test_list_cases_by_status(self):
        store = RecordingStore()

        CaseDataFetcher(store).list_cases("New")

        assert store.queries[0]["formula"] == "{Status} = 'New'"

    def test_email_history_escapes_and_degrades(self):
        store = RecordingStore(fail=True)

        cases = CaseDataFetcher(store).get_cases_by_customer_email("o'neil@example.com")

        assert cases == []
        assert store.queries[0]["formula"] == "{Customer Email} = 'o\\'neil@example.com'"

    def test_create_case_defaults_status_and_drops_empty_values(self):
        store = RecordingStore()

        case = CaseDataFetcher(store).create_case({
            "platform_order_number": "PO-1001",
            "customer_name": "Jamie Rivera",
            "store_code": "",
            "contact_reason": None,
            "not_a_field": "x",
        })

        table, fields = store.created[0]
        assert table == "CS Cases"
        assert fields == {
            "Status": "New",
            "Platform Order Number": "PO-1001",
            "Customer Name": "Jamie Rivera",
        }
        assert case.id == "recNEWNEWNEWNEWNE"


class TestOrders:
    def test_order_lookup_maps_lookup_arrays(self):
        store = RecordingStore([ORDER_RECORD])

        order = CaseDataFetcher(store).get_order_by_platform_number("PO-1001")

        assert order.carrier_tracking_number == "1Z999"
        assert order.marketplace_tracking_number == "WM123"
        assert order.shipment_dropped is True
        assert store.queries[0]["limit"] == 1
        assert "SEARCH('PO-1001', ARRAYJOIN({Platform Order Number (from 4Seller)}, ','))" in store.queries[0]["formula"]

    def test_formula_errors_in_numeric_fields_use_defaults(self):
        record = {
            "id": "recORDERBBBBBBBBB",
            "fields": {
                "Platform Order Number (from 4Seller)": ["PO-1002"],
                "Quantity (from 4Seller)": [{"specialValue": "NaN"}],
                "Sales Amt": {"error": "#ERROR!"},
                "Days Since Last 17Track Update": {"specialValue": "NaN"},
            },
        }

        order = CaseDataFetcher(RecordingStore([record])).get_order_by_platform_number("PO-1002")

        assert order.quantity == 1
        assert order.sales_amount == 0.0
        assert order.platform_order_number == "PO-1002"

    def test_order_lookup_failure_is_none(self):
        assert CaseDataFetcher(RecordingStore(fail=True)).get_order_by_platform_number("PO-1001") is None

    def test_no_order(self):
        assert CaseDataFetcher(RecordingStore()).get_order_by_platform_number("PO-404") is None

    def test_name_search_formula(self):
        store = RecordingStore()

        CaseDataFetcher(store).search_orders_by_customer_name(
            " Jamie ", "O'Neil", store_code="ST1", days_back=30, today=date(2024, 6, 10)
        )

        formula = store.queries[0]["formula"]
        assert formula.startswith("AND(")
        assert "SEARCH('jamie', LOWER(ARRAYJOIN({Recipient First Name_f}, ',')))" in formula
        assert "SEARCH('o\\'neil', LOWER(ARRAYJOIN({Recipient Name_f}, ',')))" in formula
        assert "{Shop Code_f} = 'ST1'" in formula
        assert "IS_AFTER({Order Date}, '2024-05-11')" in formula
        assert store.queries[0]["limit"] == 10

    def test_name_search_failure_is_empty(self):
        assert CaseDataFetcher(RecordingStore(fail=True)).search_orders_by_customer_name("Jamie", "Rivera") == []


class TestReferenceData:
    def test_store_and_playbook_failures_are_none(self):
        fetcher = CaseDataFetcher(RecordingStore(fail=True))

        assert fetcher.get_store_by_code("ST1") is None
        assert fetcher.get_playbook_by_category("Damaged Item") is None

    def test_store_persona_numbers_tolerate_formula_errors(self):
        record = {
            "id": "recSTOREAAAAAAAAA",
            "fields": {
                "Store Code": "ST1",
                "Persona Name": "Dana",
                "Persona Age": {"specialValue": "NaN"},
                "Max Response Hours": ["24"],
            },
        }

        store = CaseDataFetcher(RecordingStore([record])).get_store_by_code("ST1")

        assert store.persona_name == "Dana"
        assert store.persona_age is None
        assert store.max_response_hours == 24

    def test_playbook_must_be_active(self):
        store = RecordingStore([{"id": "recPLAYBOOKAAAAAA", "fields": {"Scenario Name": "Damaged"}}])

        playbook = CaseDataFetcher(store).get_playbook_by_category("Damaged Item")

        assert playbook.scenario_name == "Damaged"
        assert store.queries[0]["formula"] == (
            "AND({Issue Category} = 'Damaged Item', {Playbook Status} = 'Active')"
        )
