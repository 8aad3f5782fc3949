import json
import logging
import sys

import pytest

from formsubmit.logging_setup import JsonFormatter


def _record(message: str, *, exc_info: object = None, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="formsubmit",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=exc_info,  # type: ignore[arg-type]
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_json_formatter_includes_context_fields() -> None:
    record = _record(
        "form submission finished",
        service="DOR_REST_SUBMIT",
        submission_id="sub_1",
        form_path="/content/forms/af/x",
        ignored="value",
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "form submission finished"
    assert payload["level"] == "INFO"
    assert payload["service"] == "DOR_REST_SUBMIT"
    assert payload["submission_id"] == "sub_1"
    assert payload["form_path"] == "/content/forms/af/x"
    assert "ignored" not in payload
    assert "error_code" not in payload


@pytest.mark.unit
def test_json_formatter_keeps_non_ascii_and_exception_text() -> None:
    try:
        raise RuntimeError("renderer crashed")
    except RuntimeError:
        record = _record("Zoë failed", exc_info=sys.exc_info(), error_code="rendering_failed")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Zoë failed"
    assert payload["error_code"] == "rendering_failed"
    assert "RuntimeError: renderer crashed" in payload["exc_info"]
