import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    # standard LogRecord attributes; anything else came in through extra={...}
    _skip_keys = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # include any extra fields passed via logger.*(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in self._skip_keys:
                log_record[key] = value

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


def configure_logging(
    name: str = "patron_registry",
    level: int = logging.INFO,
    log_to_file: bool = False,
    log_dir: str = "logs",
    log_file: str = "patron_registry.jsonl",
    max_bytes: int = 5_000_000,  # 5 MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console (and optionally rotating JSON file) handlers to `name`.

    Safe to call more than once: handlers are only added the first time.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    # --- Console handler (human-readable) ---
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(console_handler)

    # --- File handler (JSON) ---
    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    return logger
