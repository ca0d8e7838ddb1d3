# Configuration
# API keys, model settings, record store tables, tracking provider and policy thresholds

import os
from dotenv import load_dotenv

load_dotenv()

# API Keys
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
AIRTABLE_API_KEY = os.getenv("AIRTABLE_API_KEY", "")
AIRTABLE_BASE_ID = os.getenv("AIRTABLE_BASE_ID", "")
TRACK17_API_KEY = os.getenv("TRACK17_API_KEY", "")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_COLOR = os.getenv("LOG_COLOR", "1") not in ("0", "false", "no")

# Model Settings
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.0-flash")
LLM_TEMPERATURE = 0.1
REPLY_TEMPERATURE = 0.3  # Slightly higher for more natural replies

# Endpoints
AIRTABLE_API_URL = os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0")
TRACK17_API_URL = os.getenv("TRACK17_API_URL", "https://api.17track.net/track/v2")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

# Record store tables
CASES_TABLE = "CS Cases"
ORDERS_TABLE = "Orders"
STORES_TABLE = "Store"
PLAYBOOK_TABLE = "CS Playbook"

# Policy thresholds (product-chosen, override from the environment)
STALE_TRACKING_DAYS = float(os.getenv("STALE_TRACKING_DAYS", "3"))
CASE_OVERDUE_HOURS = int(os.getenv("CASE_OVERDUE_HOURS", "24"))
CASE_CRITICAL_HOURS = int(os.getenv("CASE_CRITICAL_HOURS", "48"))

# Order search by customer name
ORDER_SEARCH_DEFAULT_DAYS = 30
ORDER_SEARCH_MIN_DAYS = 7
ORDER_SEARCH_MAX_DAYS = 90
ORDER_SEARCH_MAX_RECORDS = 10

# Case Statuses
CASE_STATUSES = [
    "New",
    "In Progress",
    "Pending Customer",
    "Pending Internal",
    "Replied",
    "Resolved",
    "Escalated",
]

# Statuses that suppress all aging warnings
TERMINAL_CASE_STATUSES = ["Resolved", "Replied"]

ISSUE_CATEGORIES = [
    "Wrong Item",
    "Damaged Item",
    "Not Received",
    "Tracking Question",
    "Cancel Request",
    "Return Request",
    "General Question",
    "Complaint",
    "Other",
]

SENTIMENTS = ["Frustrated", "Concerned", "Neutral", "Polite"]

URGENCIES = ["High", "Medium", "Low"]
