"""Record sinks: where extracted courses go.

Every sink receives one :class:`DetailRecord` per ``write`` call, in
traversal order. A failing write raises :class:`SinkWriteError`; nothing is
retried or buffered.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from . import config
from .error_codes import ErrorCode, SinkWriteError, TraversalError
from .logging_utils import _scraper_event
from .models import DetailRecord, TraversalConfig
from .utils import load_json_file, log_line, sanitize_filename_component, save_json_file


class RecordSink(Protocol):
    name: str

    def write(self, record: DetailRecord) -> None:
        ...

    def close(self) -> None:
        ...


def collection_name(traversal_config: TraversalConfig, prefix: Optional[str] = None) -> str:
    """``Course_{campus}_{year}``: one table per (campus, year) pair."""

    if not traversal_config.is_resolved:
        raise TraversalError(ErrorCode.CONFIG, "Campus and year must be resolved first")
    return f"{prefix or config.COLLECTION_PREFIX}_{traversal_config.campus}_{traversal_config.year}"


def _json_safe(value: Any) -> Any:
    # JSON has no NaN or Infinity; such numbers are stored as null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


class JsonFileSink:
    """Keeps ``{"data": [...]}`` in one JSON file, rewritten on every write."""

    name = "local"

    def __init__(self, output_dir: Path, table_name: str) -> None:
        stem = sanitize_filename_component(table_name).replace(" ", "_") or "courses"
        self.path = Path(output_dir) / f"{stem}.json"

    def write(self, record: DetailRecord) -> None:
        document = load_json_file(self.path, None)
        if not isinstance(document, dict) or not isinstance(document.get("data"), list):
            log_line("Create a new JSON file.")
            document = {"data": []}
        document["data"].append(_json_safe(record.to_document()))
        try:
            save_json_file(self.path, document)
        except OSError as exc:
            raise SinkWriteError(self.name, f"Cannot write {self.path}: {exc}") from exc

    def close(self) -> None:
        return None


class MongoSink:
    """Inserts each record into ``collection`` of the URI's database.

    The client is created on the first write. Inserts are independent; a
    rerun inserts the same courses again.
    """

    name = "mongo"

    def __init__(
        self,
        uri: str,
        collection: str,
        *,
        client_factory: Callable[..., Any] = MongoClient,
        default_database: Optional[str] = None,
    ) -> None:
        self.uri = uri
        self.collection_name = collection
        self.client_factory = client_factory
        self.default_database = default_database or config.MONGO_DEFAULT_DB
        self._client: Any = None
        self._collection: Any = None

    def _get_collection(self) -> Any:
        if self._collection is None:
            self._client = self.client_factory(self.uri)
            database = self._client.get_default_database(self.default_database)
            self._collection = database[self.collection_name]
            _scraper_event(
                "sink",
                phase="mongo_connect",
                database=database.name,
                collection=self.collection_name,
            )
        return self._collection

    def write(self, record: DetailRecord) -> None:
        try:
            self._get_collection().insert_one(record.to_document())
        except PyMongoError as exc:
            raise SinkWriteError(self.name, f"Insert into {self.collection_name} failed: {exc}") from exc

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._collection = None


class FanoutSink:
    """Writes every record to each selected sink, in order."""

    name = "fanout"

    def __init__(self, sinks: Sequence[RecordSink]) -> None:
        self.sinks: List[RecordSink] = list(sinks)

    def write(self, record: DetailRecord) -> None:
        for sink in self.sinks:
            sink.write(record)

    def close(self) -> None:
        errors: List[Exception] = []
        for sink in self.sinks:
            try:
                sink.close()
            except Exception as exc:  # noqa: BLE001
                log_line(f"[SINK] Failed to close {sink.name}: {exc}")
                errors.append(exc)
        if errors:
            raise errors[0]


def build_sink(
    methods: Sequence[str],
    traversal_config: TraversalConfig,
    *,
    mongo_uri: Optional[str] = None,
    output_dir: Optional[Path] = None,
    mongo_client_factory: Callable[..., Any] = MongoClient,
) -> RecordSink:
    """Return the sink for the chosen output methods (``local``/``mongo``)."""

    chosen = [m.strip().lower() for m in methods if m and m.strip()]
    unknown = sorted(set(chosen) - set(config.OUTPUT_METHODS))
    if not chosen or unknown:
        raise TraversalError(ErrorCode.CONFIG, f"Invalid output methods: {list(methods)!r}")

    table = collection_name(traversal_config)
    sinks: List[RecordSink] = []
    if "mongo" in chosen:
        if not mongo_uri:
            raise TraversalError(ErrorCode.CONFIG, "A MongoDB URI is required for the mongo output")
        sinks.append(MongoSink(mongo_uri, table, client_factory=mongo_client_factory))
    if "local" in chosen:
        sinks.append(JsonFileSink(output_dir or config.OUTPUT_DIR, table))

    summary: Dict[str, Any] = {"methods": chosen, "table": table}
    _scraper_event("sink", phase="configured", **summary)
    return sinks[0] if len(sinks) == 1 else FanoutSink(sinks)


__all__ = [
    "RecordSink",
    "collection_name",
    "JsonFileSink",
    "MongoSink",
    "FanoutSink",
    "build_sink",
]
