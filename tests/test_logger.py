import logging

from core import logger as logger_module


def test_log_corruption_dumps_truncated_payload(caplog):
    with caplog.at_level(logging.WARNING, logger="focusmate.stores"):
        logger_module.log_corruption("kv:focusmate-state", "x" * 2000, "Expecting value")

    dump = (logger_module.LOGS_DIR / "corruption_dump.log").read_text(encoding="utf-8")
    assert "kv:focusmate-state: Expecting value" in dump
    assert "x" * logger_module.RAW_PREVIEW_CHARS in dump
    assert "x" * (logger_module.RAW_PREVIEW_CHARS + 1) not in dump
    assert "Unreadable state in kv:focusmate-state" in caplog.text
    assert "xxxx" not in caplog.text


def test_setup_logging_is_idempotent():
    root = logger_module.setup_logging()
    root = logger_module.setup_logging(console_level=logging.INFO)
    try:
        assert len(root.handlers) == 3
        levels = sorted(handler.level for handler in root.handlers)
        assert levels == [logging.INFO, logging.INFO, logging.ERROR]
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
