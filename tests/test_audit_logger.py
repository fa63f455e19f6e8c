from datetime import datetime

from mqttacl.audit.logger import AuditLogger
from mqttacl.models import (
    Activity,
    AuthorizationBehaviour,
    PublishAttempt,
    Qos,
    SubscribeAttempt,
)


def test_audit_logger_logs_accept_as_info(fake_logger):
    audit = AuditLogger(enabled=True, log_inputs=False, logger=fake_logger)

    record = audit.log_decision(
        request_id="req-1",
        principal="u1",
        attempt=PublishAttempt("a/b", Qos.AT_LEAST_ONCE, retained=True),
        behaviour=AuthorizationBehaviour.ACCEPT,
        latency_ms=1.234,
        cached=False,
        source_service="svc",
    )

    assert record.request_id == "req-1"
    assert isinstance(record.timestamp, datetime)
    assert record.activity is Activity.PUBLISH
    assert record.retained is True

    assert len(fake_logger.calls) == 1
    level, payload = fake_logger.calls[0]
    assert level == "info"
    assert payload["event"] == "acl_decision"
    assert payload["allowed"] is True
    assert payload["principal"] == "u1"
    assert payload["activity"] == "publish"
    assert payload["latency_ms"] == 1.23
    assert payload["source_service"] == "svc"
    assert "input" not in payload


def test_audit_logger_logs_deny_as_warning_and_can_log_inputs(fake_logger):
    audit = AuditLogger(enabled=True, log_inputs=True, logger=fake_logger)

    record = audit.log_decision(
        request_id="req-2",
        principal="u2",
        attempt=SubscribeAttempt("a/#", Qos.EXACTLY_ONCE),
        behaviour=AuthorizationBehaviour.DENY,
        latency_ms=9.9,
        cached=True,
    )

    assert record.retained is None
    level, payload = fake_logger.calls[0]
    assert level == "warning"
    assert payload["allowed"] is False
    assert payload["cached"] is True
    assert payload["input"] == {"topic": "a/#", "qos": 2, "retained": None}
    assert "source_service" not in payload


def test_audit_logger_log_error(fake_logger):
    audit = AuditLogger(enabled=True, log_inputs=True, logger=fake_logger)

    audit.log_error(request_id="req-3", error="boom", source_service="svc")

    assert len(fake_logger.calls) == 1
    level, payload = fake_logger.calls[0]
    assert level == "error"
    assert payload["event"] == "acl_error"
    assert payload["request_id"] == "req-3"
    assert payload["error"] == "boom"
    assert payload["source_service"] == "svc"
    assert "topic" not in payload


def test_audit_logger_disabled_no_calls(fake_logger):
    audit = AuditLogger(enabled=False, log_inputs=True, logger=fake_logger)

    record = audit.log_decision(
        request_id="req-x",
        principal="u1",
        attempt=SubscribeAttempt("a", Qos.AT_MOST_ONCE),
        behaviour=AuthorizationBehaviour.ACCEPT,
        latency_ms=0.1,
    )
    audit.log_error(request_id="req-y", error="err")

    assert record.request_id == "req-x"
    assert fake_logger.calls == []
