import pytest

from mqttacl.api import AclAPI
from mqttacl.audit import AuditLogger
from mqttacl.engine import CachedEvaluator
from mqttacl.models import AuthorizationBehaviour, PublishAttempt, Qos


def test_evaluate_audits_decision(rule_set, fake_logger):
    api = AclAPI(
        evaluator=CachedEvaluator(rule_set=rule_set),
        audit=AuditLogger(enabled=True, log_inputs=False, logger=fake_logger),
    )

    result = api.evaluate(
        request_id="req-1",
        principal="sensor-gateway",
        attempt=PublishAttempt("sensors/room1/temp", Qos.AT_MOST_ONCE),
        source_service="test",
    )

    assert result.behaviour is AuthorizationBehaviour.ACCEPT
    assert result.allowed is True
    assert result.cached is False
    assert result.latency_ms >= 0

    level, payload = fake_logger.calls[0]
    assert level == "info"
    assert payload["request_id"] == "req-1"
    assert payload["principal"] == "sensor-gateway"


def test_evaluate_audits_and_reraises_errors(fake_logger):
    class BrokenEvaluator:
        def evaluate(self, principal, attempt, skip_cache=False):
            raise RuntimeError("boom")

    api = AclAPI(
        evaluator=BrokenEvaluator(),
        audit=AuditLogger(enabled=True, logger=fake_logger),
    )

    with pytest.raises(RuntimeError):
        api.evaluate(
            request_id="req-2",
            principal="x",
            attempt=PublishAttempt("a", Qos.AT_MOST_ONCE),
        )

    level, payload = fake_logger.calls[0]
    assert level == "error"
    assert payload["event"] == "acl_error"
    assert payload["error"] == "boom"
    assert payload["topic"] == "a"
