from __future__ import annotations

from typing import Literal, Optional, Sequence

from . import config
from .error_codes import ErrorCode
from .logging_utils import _scraper_event
from .utils import log_line

Entrypoint = Literal["cli", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _scraper_event(
        "error",
        phase="config",
        context="runtime_validation",
        error_code=ErrorCode.CONFIG,
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def validate_runtime_config(
    entrypoint: Entrypoint,
    *,
    methods: Optional[Sequence[str]] = None,
    mongo_uri: Optional[str] = None,
) -> None:
    """Validate runtime configuration before the browser is launched.

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    """

    timeout_fields = [
        ("PLAYWRIGHT_NAV_TIMEOUT_SECONDS", config.PLAYWRIGHT_NAV_TIMEOUT_SECONDS),
        ("PLAYWRIGHT_SELECTOR_TIMEOUT_SECONDS", config.PLAYWRIGHT_SELECTOR_TIMEOUT_SECONDS),
    ]
    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )

    for field_name, url in (("PORTAL_URL", config.PORTAL_URL), ("SEARCH_URL", config.SEARCH_URL)):
        if not url.startswith(("http://", "https://")):
            _raise_config_error(
                f"{field_name} must be an http(s) URL.",
                entrypoint=entrypoint,
                error="invalid_url",
            )

    if not config.COLLECTION_PREFIX.strip():
        _raise_config_error(
            "COLLECTION_PREFIX must not be empty.",
            entrypoint=entrypoint,
            error="empty_collection_prefix",
        )

    if methods is not None:
        unknown = sorted(set(methods) - set(config.OUTPUT_METHODS))
        if not methods or unknown:
            _raise_config_error(
                f"Output methods must be chosen from {config.OUTPUT_METHODS}.",
                entrypoint=entrypoint,
                error="invalid_output_methods",
            )
        if "mongo" in methods and not (mongo_uri or "").strip():
            _raise_config_error(
                "A MongoDB URI is required when the mongo output is selected.",
                entrypoint=entrypoint,
                error="missing_mongo_uri",
            )


__all__ = ["validate_runtime_config", "Entrypoint"]
