# External Service Clients

from dataclasses import dataclass
from typing import Optional

from clients.case_data_fetcher import CaseDataFetcher
from clients.record_store import AirtableRecordStore
from clients.text_generator import GeminiTextGenerator
from clients.tracking_client import Track17Client


@dataclass
class DashboardClients:
    """Collaborator handles, constructed once and injected into the workflow."""

    fetcher: CaseDataFetcher
    tracking: Optional[Track17Client] = None  # None when no tracking API key is configured
    generator: Optional[GeminiTextGenerator] = None  # None when no LLM API key is configured
    reply_generator: Optional[GeminiTextGenerator] = None


def build_clients() -> DashboardClients:
    """Build the clients from config. Missing optional keys leave that client unset."""
    from config import (
        AIRTABLE_API_KEY,
        AIRTABLE_BASE_ID,
        GOOGLE_API_KEY,
        LLM_MODEL,
        LLM_TEMPERATURE,
        REPLY_TEMPERATURE,
        TRACK17_API_KEY,
    )

    fetcher = CaseDataFetcher(AirtableRecordStore(AIRTABLE_API_KEY, AIRTABLE_BASE_ID))
    tracking = Track17Client(TRACK17_API_KEY) if TRACK17_API_KEY else None
    generator = reply_generator = None
    if GOOGLE_API_KEY:
        generator = GeminiTextGenerator(GOOGLE_API_KEY, LLM_MODEL, LLM_TEMPERATURE)
        reply_generator = GeminiTextGenerator(GOOGLE_API_KEY, LLM_MODEL, REPLY_TEMPERATURE)
    return DashboardClients(
        fetcher=fetcher,
        tracking=tracking,
        generator=generator,
        reply_generator=reply_generator,
    )


__all__ = [
    "AirtableRecordStore",
    "CaseDataFetcher",
    "DashboardClients",
    "GeminiTextGenerator",
    "Track17Client",
    "build_clients",
]
