# npm_runner/logging_utils.py
from __future__ import annotations
import logging
import sys
import json
import datetime


class JsonFormatter(logging.Formatter):
    """Compact single-line JSON formatter for logs.

    Emits objects with keys: ts (ISO8601 UTC), level, module, msg, meta.
    meta is taken from record.__dict__.get('meta') and enriched with the
    invocation fields that may be attached to a LogRecord (command, cwd, ...).
    """

    def _safe(self, v):
        # Ensure value is JSON serializable; fallback to str()
        try:
            json.dumps(v)
            return v
        except (TypeError, ValueError):
            return str(v)

    def format(self, record: logging.LogRecord) -> str:
        rec_ts = datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z")
        meta = {}
        raw_meta = record.__dict__.get("meta")
        if isinstance(raw_meta, dict):
            meta.update({k: self._safe(v) for k, v in raw_meta.items()})

        for k in ("command", "cwd", "tool", "exit_code", "elapsed"):
            if k in record.__dict__ and record.__dict__[k] is not None:
                meta[k] = self._safe(record.__dict__[k])

        payload = {
            "ts": rec_ts,
            "level": record.levelname.lower(),
            "module": record.name,
            "msg": record.getMessage(),
            "meta": meta,
        }
        if record.exc_info:
            payload["meta"]["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, separators=(",", ":"))


def configure_logging(verbose: bool = False, structured: bool = False) -> None:
    """Configure global logging for npm_runner.

    Safe to call repeatedly: a single stderr handler is installed and its
    formatter is switched to match `structured`. npm's own output goes to
    stdout, so log lines stay on stderr.
    """
    lg = logging.getLogger()
    lg.setLevel(logging.DEBUG if verbose else logging.INFO)

    json_fmt = JsonFormatter()
    human_fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")

    for h in lg.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            if structured and not isinstance(h.formatter, JsonFormatter):
                h.setFormatter(json_fmt)
            elif not structured and isinstance(h.formatter, JsonFormatter):
                h.setFormatter(human_fmt)
            return

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(json_fmt if structured else human_fmt)
    lg.addHandler(sh)
