import json
import logging

from patron_registry.logger import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("patron_registry", logging.INFO, __file__, 1, "saved %d", (3,), None)
    record.path = "Patrons.txt"

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "saved 3"
    assert data["level"] == "INFO"
    assert data["path"] == "Patrons.txt"
    assert "lineno" not in data


def test_configure_logging_writes_json_file(tmp_path):
    name = "patron_registry.test_file_logging"
    logger = configure_logging(name=name, level=logging.DEBUG, log_to_file=True, log_dir=str(tmp_path))
    try:
        logger.info("hello", extra={"patron_id": "1234567"})
        for handler in logger.handlers:
            handler.flush()

        line = (tmp_path / "patron_registry.jsonl").read_text(encoding="utf-8").splitlines()[-1]
        assert json.loads(line)["patron_id"] == "1234567"

        again = configure_logging(name=name, log_to_file=True, log_dir=str(tmp_path))
        assert len(again.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
