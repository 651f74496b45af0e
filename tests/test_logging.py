from __future__ import annotations

import json
import logging

from focus_tracker.logging import JsonFormatter, configure_logging


def test_json_formatter_emits_one_object_with_extras() -> None:
    record = logging.LogRecord("core.engine", logging.INFO, __file__, 1, "analyzed %d task(s)", (3,), None)
    record.insights = 2

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "core.engine"
    assert payload["message"] == "analyzed 3 task(s)"
    assert payload["insights"] == 2
    assert "args" not in payload


def test_configure_logging_replaces_root_handlers() -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        configure_logging(verbose=True, fmt="json")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

        configure_logging(verbose=False, fmt="text")
        assert root.level == logging.INFO
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved[0]:
            root.addHandler(handler)
        root.setLevel(saved[1])
