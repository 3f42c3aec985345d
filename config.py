import os
import sys

from dotenv import load_dotenv

from enums.currency import Currency
from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test runs to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)


def _exit_with_config_error(name: str, reason: Exception | str, expected: str) -> None:
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


def _positive_int(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name, str(default)))
        if value <= 0:
            raise ValueError(f"{name} must be positive (got: {value})")
        return value
    except ValueError as e:
        _exit_with_config_error(name, e, "Positive integer (e.g., 5, 10, 30)")


# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", RuntimeEnvironment.DEV.value))
except ValueError as e:
    _exit_with_config_error(
        "RUNTIME_ENVIRONMENT", e,
        ", ".join(env.value for env in RuntimeEnvironment)
    )

# Database (hosted relational backend, SQLite by default)
DB_NAME = os.environ.get("DB_NAME", "foodhub.db")
DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")
SQL_ECHO = os.environ.get("SQL_ECHO", "false") == "true"

# Anonymous cart storage on the device
LOCAL_CART_PATH = os.environ.get("LOCAL_CART_PATH", "data/foodhub_cart.json")

# Currency used for display and checkout rounding
try:
    CURRENCY = Currency(os.environ.get("CURRENCY", Currency.INR.value))
except ValueError as e:
    _exit_with_config_error("CURRENCY", e, ", ".join(c.value for c in Currency))

# Catalog display defaults
DEFAULT_ITEM_IMAGE = os.environ.get("DEFAULT_ITEM_IMAGE", "🍽️")
try:
    DEFAULT_ITEM_RATING = float(os.environ.get("DEFAULT_ITEM_RATING", "4.5"))
    if not 0 <= DEFAULT_ITEM_RATING <= 5:
        raise ValueError(f"DEFAULT_ITEM_RATING must be between 0 and 5 (got: {DEFAULT_ITEM_RATING})")
except ValueError as e:
    _exit_with_config_error("DEFAULT_ITEM_RATING", e, "Number between 0 and 5 (e.g., 4.5)")
POPULAR_ITEMS_LIMIT = _positive_int("POPULAR_ITEMS_LIMIT", 6)
RECENT_ORDERS_LIMIT = _positive_int("RECENT_ORDERS_LIMIT", 5)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask sensitive data in logs
LOG_DIR = os.environ.get("LOG_DIR", "logs")

if RUNTIME_ENVIRONMENT == RuntimeEnvironment.PROD:
    LOG_RETENTION_DAYS = _positive_int("LOG_RETENTION_DAYS", 30)
else:
    LOG_RETENTION_DAYS = _positive_int("LOG_RETENTION_DAYS", 5)
