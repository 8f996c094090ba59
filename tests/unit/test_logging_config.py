"""Unit tests for structured logging."""

import json
import logging

from userhub.logging_config import JsonFormatter, RequestContextFilter, actor_id_var, request_id_var


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("userhub.test", logging.INFO, __file__, 1, "User %s", ("created",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _filtered(**extra) -> logging.LogRecord:
    record = _record(**extra)
    RequestContextFilter().filter(record)
    return record


class TestRequestContextFilter:
    def test_binds_request_and_actor(self):
        request_token = request_id_var.set("req-9")
        actor_token = actor_id_var.set("u-1")
        try:
            record = _filtered()
        finally:
            actor_id_var.reset(actor_token)
            request_id_var.reset(request_token)

        assert record.request_id == "req-9"
        assert record.actor_id == "u-1"

    def test_outside_a_request(self):
        record = _filtered()

        assert record.request_id == "-"
        assert record.actor_id == "-"

    def test_explicit_extra_wins(self):
        token = actor_id_var.set("u-1")
        try:
            record = _filtered(actor_id="admin-id")
        finally:
            actor_id_var.reset(token)

        assert record.actor_id == "admin-id"


class TestJsonFormatter:
    def test_includes_extra_and_context_fields(self):
        token = actor_id_var.set("u-1")
        try:
            record = _filtered(user_id="u-2")
        finally:
            actor_id_var.reset(token)

        output = json.loads(JsonFormatter().format(record))

        assert output["message"] == "User created"
        assert output["level"] == "INFO"
        assert output["user_id"] == "u-2"
        assert output["actor_id"] == "u-1"
        assert "request_id" not in output

    def test_standard_record_attributes_are_not_repeated(self):
        output = json.loads(JsonFormatter().format(_filtered()))

        assert "lineno" not in output
        assert "args" not in output

    def test_unserialisable_extra_is_stringified(self):
        output = json.loads(JsonFormatter().format(_record(fields={"a"})))

        assert output["fields"] == str({"a"})

    def test_non_ascii_messages_survive(self):
        record = logging.LogRecord("userhub.test", logging.INFO, __file__, 1, "Usuário criado", None, None)

        assert json.loads(JsonFormatter().format(record))["message"] == "Usuário criado"
