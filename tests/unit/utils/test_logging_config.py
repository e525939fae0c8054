# tests/unit/utils/test_logging_config.py

import logging

from finstat.utils.logging_config import ExtraFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("finstat.test", logging.INFO, __file__, 1, "Report built", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_fields_are_appended_sorted():
    formatter = ExtraFormatter(fmt="%(levelname)s | %(message)s")

    line = formatter.format(_record(periods=4, entity="ACME"))

    assert line == "INFO | Report built | entity=ACME periods=4"


def test_record_without_extra_is_unchanged():
    formatter = ExtraFormatter(fmt="%(message)s")

    assert formatter.format(_record()) == "Report built"


def test_setup_logging_installs_single_stream_handler(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.delenv("LOG_DIR", raising=False)

    setup_logging("debug")
    setup_logging("debug")

    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, ExtraFormatter)
    assert root.level == logging.DEBUG


def test_setup_logging_adds_file_handler_with_log_dir(monkeypatch, tmp_path):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))

    setup_logging(logging.INFO)

    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert (tmp_path / "logs").is_dir()
    file_handlers[0].close()
