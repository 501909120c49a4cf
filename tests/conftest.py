from __future__ import annotations

from pathlib import Path

import pytest

from catalog_crawler import config, utils


@pytest.fixture(autouse=True)
def _isolated_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "LOG_DIR", data_dir / "logs")
    monkeypatch.setattr(config, "LOG_FILE", data_dir / "logs" / "latest.log")
    monkeypatch.setattr(config, "OUTPUT_DIR", tmp_path / "dist")
    utils._configure_logger(data_dir / "logs" / "latest.log")
