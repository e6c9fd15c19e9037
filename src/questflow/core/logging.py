from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

_CONFIGURED = False


class JsonFormatter(logging.Formatter):
    """Serialize log records as structured JSON."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_info"] = record.stack_info
        return json.dumps(data, ensure_ascii=False)


def _resolve_level(raw: str | None) -> int:
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Configure root logging handlers once per process.

    ``LOG_FORMAT=json`` switches to structured records, ``LOG_DIR`` adds a
    file handler next to the console one and ``LOG_LEVEL`` sets the root level.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    use_json = os.getenv("LOG_FORMAT", "").strip().lower() == "json"
    if use_json:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    log_dir_env = os.getenv("LOG_DIR")
    if log_dir_env:
        log_dir = Path(log_dir_env)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logging.getLogger(__name__).warning(
                "Unable to create log directory %s: %s", log_dir, exc
            )
        else:
            file_handler = logging.FileHandler(
                log_dir / "questflow.log", mode="a", encoding="utf-8"
            )
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    logging.basicConfig(
        level=_resolve_level(os.getenv("LOG_LEVEL")),
        handlers=handlers,
        force=True,
    )

    _CONFIGURED = True


__all__ = ["JsonFormatter", "configure_logging"]
