import json
import logging
import sys

from npm_runner.logging_utils import JsonFormatter, configure_logging


def test_json_formatter_includes_meta():
    record = logging.LogRecord("npm_runner.tool", logging.INFO, __file__, 1, "running %s", ("npm install",), None)
    record.meta = {"command": "npm install", "cwd": "/work"}
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "info"
    assert payload["module"] == "npm_runner.tool"
    assert payload["msg"] == "running npm install"
    assert payload["meta"] == {"command": "npm install", "cwd": "/work"}
    assert payload["ts"].endswith("Z")


def test_json_formatter_stringifies_unserializable_values():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "m", (), None)
    record.meta = {"obj": object()}
    payload = json.loads(JsonFormatter().format(record))
    assert payload["meta"]["obj"].startswith("<object object")


def test_configure_logging_is_idempotent(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    configure_logging(structured=False)
    configure_logging(structured=True, verbose=True)
    stderr_handlers = [h for h in root.handlers if getattr(h, "stream", None) is sys.stderr]
    assert len(stderr_handlers) == 1
    assert isinstance(stderr_handlers[0].formatter, JsonFormatter)
    assert root.level == logging.DEBUG
