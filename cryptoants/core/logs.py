"""cryptoants.core.logs

Stdlib logging, configured once at the process edge (CLI, tests).

Library modules only ever call ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import json
import logging
import sys

from cryptoants.core.config import LoggingConfig
from cryptoants.core.exceptions import ConfigError

_HANDLER_NAME = "cryptoants"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, sort_keys=True)


def configure_logging(cfg: LoggingConfig) -> logging.Logger:
    """Install (or replace) the package handler on the ``cryptoants`` logger."""

    level = logging.getLevelName(cfg.level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {cfg.level}")

    root = logging.getLogger("cryptoants")
    for h in list(root.handlers):
        if h.get_name() == _HANDLER_NAME:
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    if cfg.json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root.addHandler(handler)
    root.setLevel(level)
    return root
