from __future__ import annotations

"""Centralised error taxonomy for traversal failures.

Codes appear in structured log lines and on the exceptions below so that a
failed run explains which kind of step stopped it.
"""


class ErrorCode:
    WAIT_TIMEOUT = "wait_timeout"
    SITE_STRUCTURE = "site_structure_changed"
    SINK_WRITE = "sink_write_failed"
    NUMERIC_PARSE = "numeric_parse"
    CONFIG = "config_error"
    INTERNAL = "internal_error"


class TraversalError(Exception):
    """A fatal traversal failure; aborts the whole run."""

    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code

    def __str__(self) -> str:  # pragma: no cover - inherited behaviour
        return str(self.args[0]) if self.args else ""


class WaitTimeoutError(TraversalError):
    """A navigation or detail selector never appeared within the bound."""

    def __init__(self, selector: str, message: str) -> None:
        super().__init__(ErrorCode.WAIT_TIMEOUT, message)
        self.selector = selector


class SinkWriteError(TraversalError):
    def __init__(self, sink: str, message: str) -> None:
        super().__init__(ErrorCode.SINK_WRITE, message)
        self.sink = sink


__all__ = ["ErrorCode", "TraversalError", "WaitTimeoutError", "SinkWriteError"]
