"""Configuration constants for the course catalog crawler."""
from __future__ import annotations

import os
from pathlib import Path

DATA_DIR: Path = Path(os.getenv("CATALOG_DATA_DIR", "./data"))
LOG_DIR: Path = DATA_DIR / "logs"
LOG_FILE: Path = LOG_DIR / "latest.log"
# Local JSON output lands here, one file per (campus, year) pair.
OUTPUT_DIR: Path = Path(os.getenv("CATALOG_OUTPUT_DIR", "./dist"))

PORTAL_URL: str = os.getenv(
    "CATALOG_PORTAL_URL",
    "https://mynottingham.nottingham.ac.uk/psp/psprd/EMPLOYEE/HRMS/c/"
    "UN_PROG_AND_MOD_EXTRACT.UN_PAM_CRSE_EXTRCT.GBL?",
)
SEARCH_URL: str = os.getenv(
    "CATALOG_SEARCH_URL",
    "https://campus.nottingham.ac.uk/psc/csprd/EMPLOYEE/HRMS/c/"
    "UN_PROG_AND_MOD_EXTRACT.UN_PAM_CRSE_EXTRCT.GBL?%252fningbo%252fasp%252fmoduledetails.asp",
)

HEADLESS: bool = os.getenv("CATALOG_HEADLESS", "true").strip().lower() not in {"0", "false"}

COLLECTION_PREFIX: str = os.getenv("CATALOG_COLLECTION_PREFIX", "Course")
MONGO_URI: str = os.getenv("CATALOG_MONGO_URI", "")
# Used when the connection string does not name a database.
MONGO_DEFAULT_DB: str = os.getenv("CATALOG_MONGO_DB", "test")

OUTPUT_METHODS: tuple[str, ...] = ("mongo", "local")


def _parse_timeout_seconds(env_var: str, default: int, *, minimum: int = 1) -> int:
    """Parse a timeout value in seconds from the environment with bounds."""

    try:
        value = int(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


# Playwright timeouts (seconds)
# Navigation timeout for page.goto / page.reload calls.
PLAYWRIGHT_NAV_TIMEOUT_SECONDS: int = _parse_timeout_seconds(
    "CATALOG_NAV_TIMEOUT_SECONDS", 30
)
# Selector waits (entry button, criteria form, results/empty race, detail anchor).
PLAYWRIGHT_SELECTOR_TIMEOUT_SECONDS: int = _parse_timeout_seconds(
    "CATALOG_SELECTOR_TIMEOUT_SECONDS", 30
)

USER_AGENT: str = (
    "Mozilla/5.0 (PlayBook; U; RIM Tablet OS 2.1.0; en-US) AppleWebKit/536.2+ "
    "(KHTML like Gecko) Version/7.2.1.0 Safari/536.2+"
)
# The tall mobile viewport keeps every listing row rendered without scrolling.
VIEWPORT: dict[str, int] = {"width": 600, "height": 8000}
BROWSER_ARGS: tuple[str, ...] = (
    "--disable-gpu",
    "--no-sandbox",
    "--no-zygote",
    "--disable-dev-shm-usage",
)


def selector_timeout_ms() -> int:
    """Return the selector wait bound in milliseconds, as Playwright expects."""

    return PLAYWRIGHT_SELECTOR_TIMEOUT_SECONDS * 1000


def nav_timeout_ms() -> int:
    return PLAYWRIGHT_NAV_TIMEOUT_SECONDS * 1000
