from __future__ import annotations

import io
import json
import logging

from expense_tracker.logger import REDACTED, StructuredLogger


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_records_are_json_with_native_extras(logger: StructuredLogger, log_stream) -> None:
    logger.info("Loaded %d item(s).", 3, extra={"event": "LOAD", "count": 3})

    entry = _lines(log_stream)[-1]
    assert entry["level"] == "INFO"
    assert entry["message"] == "Loaded 3 item(s)."
    assert entry["extra"] == {"event": "LOAD", "count": 3}


def test_bearer_tokens_and_secret_fields_are_masked(logger: StructuredLogger, log_stream) -> None:
    logger.warning("Header was %s", "Bearer abc.def.ghi", extra={"token": "abc.def.ghi"})

    raw = log_stream.getvalue()
    assert "abc.def.ghi" not in raw
    entry = _lines(log_stream)[-1]
    assert entry["message"] == f"Header was Bearer {REDACTED}"
    assert entry["extra"]["token"] == REDACTED


def test_exception_includes_traceback(logger: StructuredLogger, log_stream) -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("Failed")

    entry = _lines(log_stream)[-1]
    assert entry["level"] == "ERROR"
    assert "ValueError: boom" in entry["exception"]


def test_log_file_is_written(tmp_path, request) -> None:
    target = tmp_path / "logs" / "client.log"
    log = StructuredLogger(
        name=f"file.{request.node.nodeid}",
        stream=io.StringIO(),
        log_file=str(target),
        max_bytes=1024,
        backup_count=1,
    )

    log.info("hello")
    for handler in log.logger.handlers:
        handler.flush()

    assert json.loads(target.read_text(encoding="utf-8").splitlines()[0])["message"] == "hello"
    for handler in list(log.logger.handlers):
        handler.close()
        log.logger.removeHandler(handler)


def test_reused_name_keeps_single_handler_set(request) -> None:
    name = f"reuse.{request.node.nodeid}"
    first = StructuredLogger(name=name, stream=io.StringIO(), log_file="")
    StructuredLogger(name=name, stream=io.StringIO(), log_file="")

    assert len(logging.getLogger(name).handlers) == len(first.logger.handlers) == 1
