"""
Configuration constants and environment setup.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# CASE SYSTEM API
# =============================================================================

CASE_API_URL = os.environ.get("CASE_API_URL", "http://localhost:8089").rstrip("/")
CASE_API_USER = os.environ.get("CASE_API_USER", "")
CASE_API_PASS = os.environ.get("CASE_API_PASS", "")
CASE_API_TOKEN = os.environ.get("CASE_API_TOKEN") or None  # optional pre-seeded bearer
CASE_API_TIMEOUT = float(os.environ.get("CASE_API_TIMEOUT", "20"))

CASE_LOGIN_PATH = "/jvncUser/api/v1/users/login"
CASE_SEARCH_PATH = "/jvncProceed/api/v1/proceed/searchElectronicAppointDateByCase/search?version=1"
CASE_JUDGES_PATH = "/jvncLookup/api/v1/judges/listAllActivedWork?version=1"
CASE_JUDGE_POOL_PATH = "/jvncManager/api/v1/managerjudgepool/judgeschedule/{month}/{year}/0"

CASE_API_VERSION = 1
CASE_PAGE_LIMIT = 200

# success=false messages that mean "no hearings that day" (matched case-insensitively)
CASE_NOT_FOUND_MESSAGES = ("ไม่พบข้อมูล", "not found", "no data")

# =============================================================================
# GOOGLE CONFIGURATION
# =============================================================================

GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
GOOGLE_CALENDAR_ID = os.environ.get("GOOGLE_CALENDAR_ID", "")
GOOGLE_SHEET_ID = os.environ.get("GOOGLE_SHEET_ID", "")
GOOGLE_CREDENTIALS = os.environ.get("GOOGLE_CREDENTIALS", "")  # service account JSON
GOOGLE_API_TIMEOUT = float(os.environ.get("GOOGLE_API_TIMEOUT", "30"))

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/spreadsheets",
]

SHEET_CONFIG_RANGE = "Config!A2:B"
SHEET_USERS_RANGE = "Users!A2:A"
SHEET_LOGS_RANGE = "Logs!A:G"

# =============================================================================
# TELEGRAM CONFIGURATION (keys looked up in the Config sheet)
# =============================================================================

TELEGRAM_API_URL = os.environ.get("TELEGRAM_API_URL", "https://api.telegram.org").rstrip("/")
TELEGRAM_TIMEOUT = float(os.environ.get("TELEGRAM_TIMEOUT", "10"))

TELEGRAM_KEYS = {
    "default": ("TELEGRAM_TOKEN", "CHAT_ID"),
    "admin": ("ADMIN_TELEGRAM_TOKEN", "ADMIN_CHAT_ID"),
}

# =============================================================================
# SYNC CONFIGURATION
# =============================================================================

SYNC_DEFAULT_DAYS = 7
SYNC_MAX_DAYS = 90

SUMMARY_MARKER = "คดีวันนี้"  # e.g., "⚖️ คดีวันนี้ 12 คดี"
SYNC_ACTOR = "Auto-Bot"

LOCAL_TIMEZONE = "Asia/Bangkok"
BUDDHIST_ERA_OFFSET = 543

# =============================================================================
# API CONFIGURATION
# =============================================================================

SYNC_API_KEY = os.environ.get("SYNC_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "3000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
