# Record Store Client
# Generic find / query / create / update over the Airtable REST API

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from clients.formula import Expr
from config import AIRTABLE_API_URL, HTTP_TIMEOUT_SECONDS
from errors import RecordStoreError
from utils.logger import log_api_call, log_api_result, log_error


class AirtableRecordStore:
    """
    Thin record store client. Records are returned as raw dicts:
    {"id": ..., "createdTime": ..., "fields": {...}}.

    Filters are only accepted as formula expressions built with clients.formula.
    """

    SERVICE = "record_store"

    def __init__(
        self,
        api_key: str,
        base_id: str,
        api_url: str = AIRTABLE_API_URL,
        http_client: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.base_id = base_id
        self.api_url = api_url.rstrip("/")
        self.http = http_client or httpx.Client(timeout=timeout)

    def _url(self, table: str, record_id: str = None) -> str:
        url = f"{self.api_url}/{self.base_id}/{quote(table, safe='')}"
        if record_id:
            url += f"/{quote(record_id, safe='')}"
        return url

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def _request(self, operation: str, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self.http.request(method, url, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            log_error(f"Record store {operation} request failed", e)
            raise RecordStoreError(operation, str(e)) from e

    def _check(self, operation: str, response: httpx.Response) -> Dict[str, Any]:
        if response.status_code >= 400:
            log_api_result(self.SERVICE, operation, False, f"HTTP {response.status_code}")
            raise RecordStoreError(operation, response.text[:200], response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise RecordStoreError(operation, "invalid JSON response", response.status_code) from e

    def find(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a single record.

        Returns:
            The record, or None if it does not exist.
        """
        log_api_call(self.SERVICE, "find", {"table": table, "id": record_id})
        response = self._request("find", "GET", self._url(table, record_id))
        if response.status_code == 404:
            log_api_result(self.SERVICE, "find", True, "not found")
            return None
        record = self._check("find", response)
        log_api_result(self.SERVICE, "find", True)
        return record

    def query(
        self,
        table: str,
        formula: Optional[Expr] = None,
        sort: Optional[List[Dict[str, str]]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        List records matching a formula, following pagination.

        Args:
            table: Table name
            formula: Filter built with clients.formula (never a raw string)
            sort: [{"field": ..., "direction": "asc"|"desc"}, ...]
            limit: Maximum number of records to return
        """
        if formula is not None and not isinstance(formula, Expr):
            raise TypeError("query formula must be built with clients.formula")

        params: Dict[str, Any] = {}
        if formula is not None:
            params["filterByFormula"] = formula.render()
        for i, s in enumerate(sort or []):
            params[f"sort[{i}][field]"] = s["field"]
            params[f"sort[{i}][direction]"] = s.get("direction", "asc")
        if limit is not None:
            params["maxRecords"] = limit

        log_api_call(self.SERVICE, "query", {"table": table, **params})

        records: List[Dict[str, Any]] = []
        offset = None
        while True:
            page_params = dict(params)
            if offset:
                page_params["offset"] = offset
            data = self._check("query", self._request("query", "GET", self._url(table), params=page_params))
            records.extend(data.get("records", []))
            offset = data.get("offset")
            if not offset or (limit is not None and len(records) >= limit):
                break

        if limit is not None:
            records = records[:limit]
        log_api_result(self.SERVICE, "query", True, f"records: {len(records)}")
        return records

    def create(self, table: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        log_api_call(self.SERVICE, "create", {"table": table, "fields": list(fields.keys())})
        record = self._check("create", self._request("create", "POST", self._url(table), json={"fields": fields}))
        log_api_result(self.SERVICE, "create", True, f"id: {record.get('id')}")
        return record

    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        log_api_call(self.SERVICE, "update", {"table": table, "id": record_id, "fields": list(fields.keys())})
        record = self._check(
            "update",
            self._request("update", "PATCH", self._url(table, record_id), json={"fields": fields}),
        )
        log_api_result(self.SERVICE, "update", True)
        return record
