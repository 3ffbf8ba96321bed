from __future__ import annotations

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from magazine_gen.adapters import observability


@pytest.fixture(autouse=True)
def _restore_root_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "MAGAZINE_GEN_LOG_LEVEL",
        "MAGAZINE_GEN_LOG_PATH",
        "MAGAZINE_GEN_LOG_MAX_BYTES",
        "MAGAZINE_GEN_LOG_BACKUP_COUNT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(observability, "_CONFIGURED", False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _file_handlers() -> list[RotatingFileHandler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]


def test_defaults_to_warning_on_stderr_without_log_file() -> None:
    observability.configure_runtime_logging()
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert _file_handlers() == []


def test_reads_level_and_rotating_file_from_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    log_path = tmp_path / "logs" / "magazine.log"
    monkeypatch.setenv("MAGAZINE_GEN_LOG_LEVEL", "debug")
    monkeypatch.setenv("MAGAZINE_GEN_LOG_PATH", str(log_path))
    monkeypatch.setenv("MAGAZINE_GEN_LOG_MAX_BYTES", "1")
    monkeypatch.setenv("MAGAZINE_GEN_LOG_BACKUP_COUNT", "not-a-number")

    observability.configure_runtime_logging()

    assert logging.getLogger().level == logging.DEBUG
    file_handlers = _file_handlers()
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 64 * 1024
    assert file_handlers[0].backupCount == 5

    logging.getLogger("magazine_gen.test").info("magazine.test event=1")
    file_handlers[0].flush()
    assert "magazine.test event=1" in log_path.read_text(encoding="utf-8")


def test_explicit_level_wins_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAGAZINE_GEN_LOG_LEVEL", "DEBUG")
    observability.configure_runtime_logging("ERROR")
    assert logging.getLogger().level == logging.ERROR


def test_configures_only_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAGAZINE_GEN_LOG_PATH", str(tmp_path / "first.log"))
    observability.configure_runtime_logging()
    handlers = list(logging.getLogger().handlers)

    monkeypatch.setenv("MAGAZINE_GEN_LOG_PATH", str(tmp_path / "second.log"))
    observability.configure_runtime_logging("DEBUG")
    assert logging.getLogger().handlers == handlers
    assert not (tmp_path / "second.log").exists()
