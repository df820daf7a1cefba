import json
import logging
import tempfile
from pathlib import Path

from search_core.infrastructure.logging.logger import JsonFormatter, setup_logger


def make_record(msg, extra=None):
    record = logging.LogRecord("search_core", logging.INFO, __file__, 1, msg, None, None)
    if extra is not None:
        record.extra = extra
    return record


def test_json_formatter_merges_extra():
    line = JsonFormatter().format(make_record("exchange.close", {"messages": 2}))
    payload = json.loads(line)
    assert payload["msg"] == "exchange.close"
    assert payload["level"] == "INFO"
    assert payload["messages"] == 2
    assert payload["ts"].endswith("Z")


def test_json_formatter_redacts():
    payload = json.loads(JsonFormatter(redact=True).format(make_record("x" * 200)))
    assert len(payload["msg"]) == 64


def test_setup_logger_writes_file():
    with tempfile.TemporaryDirectory() as d:
        logger = setup_logger("INFO", log_dir=d)
        logger.info("server.start", extra={"extra": {"save_dir": "/tmp"}})
        for h in logger.handlers:
            h.flush()
        lines = (Path(d) / "search.log").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["save_dir"] == "/tmp"
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        logger.propagate = True
