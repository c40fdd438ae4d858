"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "expense_tracker")
DB_USER: str = os.getenv("DB_USER", "expense_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "5"))

# ── Store timeouts ────────────────────────────────────────
DB_CONNECT_TIMEOUT: int = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
STORE_TIMEOUT_MS: int = int(os.getenv("STORE_TIMEOUT_MS", "10000"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Currency ──────────────────────────────────────────────
DEFAULT_CURRENCY: str = "INR"

# ── Analytics ─────────────────────────────────────────────
BUDGET_ALERT_THRESHOLD: float = float(os.getenv("BUDGET_ALERT_THRESHOLD", "80"))
PREDICTION_LOOKBACK_MONTHS: int = int(os.getenv("PREDICTION_LOOKBACK_MONTHS", "3"))
TREND_MONTHS: int = int(os.getenv("TREND_MONTHS", "6"))
RECENT_EXPENSES_LIMIT: int = int(os.getenv("RECENT_EXPENSES_LIMIT", "5"))

# ── Categories ────────────────────────────────────────────
DEFAULT_CATEGORIES: list[str] = [
    "Food", "Transport", "Rent", "Entertainment", "Health", "Other",
]
