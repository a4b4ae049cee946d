# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from people_import.logging.init import LOGGER_NAME, reset_logging
from people_import.models.config_models import ImportConfig


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
        yield p


@pytest.fixture()
def config() -> ImportConfig:
    return ImportConfig()


@pytest.fixture()
def sample_csv() -> str:
    return (
        "First Name,Last Name,Email,Status\n"
        "Jane,Doe,jane@x.com,Member\n"
        ",Smith,bad@x.com,Visitor\n"
        "Jane,Doe,jane@x.com,Member\n"
    )


@pytest.fixture()
def sample_config_yaml() -> str:
    return """batch_size: 2
strict: false
field_mappings:
  Mobile: phone
  Household: skip
status_mappings:
  Elder: leader
database:
  table: people
  host: localhost
  port: 5432
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_source(temp_workdir: Path, sample_csv: str):
    def _write(name: str = "people.csv", content: str | None = None) -> Path:
        path = temp_workdir / "data" / name
        path.write_text(sample_csv if content is None else content, encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    # CLI テスト後に capsys のストリームを握った handler を残さない
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    reset_logging()
