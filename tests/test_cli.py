from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from catalog_crawler import cli, traversal
from catalog_crawler.error_codes import WaitTimeoutError
from catalog_crawler.models import DetailRecord, Group, TraversalConfig
from catalog_crawler.sinks import JsonFileSink
from catalog_crawler.traversal import TraversalSummary

RESOLVED = TraversalConfig(campus_code="N", campus="Nottingham", year_code="25", year="2025")


def _record() -> DetailRecord:
    return DetailRecord(belongs_to=Group(code="SCI", name="Science"), code="SCI1001", title="Chemistry")


def test_cli_success_passes_pinned_axes(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, Any] = {}

    def fake_crawl(sink_factory, traversal_config, chooser, *, headless):
        captured["config"] = traversal_config
        captured["sink"] = sink_factory(RESOLVED)
        captured["headless"] = headless
        return TraversalSummary(config=RESOLVED, groups_total=1, groups_done=1, records_written=2)

    monkeypatch.setattr(traversal, "crawl", fake_crawl)

    code = cli.main(
        ["--campus", "N", "--year", "25", "--output", "local", "--output-dir", str(tmp_path)]
    )

    assert code == 0
    assert captured["config"] == TraversalConfig(campus_code="N", year_code="25")
    assert isinstance(captured["sink"], JsonFileSink)
    assert captured["sink"].path == tmp_path / "Course_Nottingham_2025.json"
    assert captured["headless"] is None


def test_cli_fatal_error_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_crawl(*_args, **_kwargs):
        raise WaitTimeoutError('[id="CRSE_CODE$0"]', "detail never rendered")

    monkeypatch.setattr(traversal, "crawl", fake_crawl)

    assert cli.main(["--output", "local", "--headed"]) == 1


def test_cli_rejects_unknown_output() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--output", "csv"])

    assert excinfo.value.code == 2


def test_cli_prompts_for_mongo_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli.config, "MONGO_URI", "")
    monkeypatch.setattr(cli, "prompt_mongo_uri", lambda: "mongodb://localhost/catalog")
    seen: dict[str, Any] = {}

    def fake_crawl(sink_factory, traversal_config, chooser, *, headless):
        seen["sink"] = sink_factory(RESOLVED)
        return TraversalSummary(config=RESOLVED)

    monkeypatch.setattr(traversal, "crawl", fake_crawl)

    assert cli.main(["--output", "mongo"]) == 0
    assert seen["sink"].uri == "mongodb://localhost/catalog"


def test_cli_interrupt_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_crawl(*_args, **_kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(traversal, "crawl", fake_crawl)

    assert cli.main(["--output", "local"]) == 130


def test_cli_output_dir_leaves_default_dir_alone(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    out = tmp_path / "out"

    def fake_crawl(sink_factory, traversal_config, chooser, *, headless):
        sink_factory(RESOLVED).write(_record())
        return TraversalSummary(config=RESOLVED, groups_total=1, groups_done=1, records_written=1)

    monkeypatch.setattr(traversal, "crawl", fake_crawl)

    assert cli.main(["--output", "local", "--output-dir", str(out)]) == 0
    assert (out / "Course_Nottingham_2025.json").exists()
    assert not cli.config.OUTPUT_DIR.exists()
