"""Tests for the MQTT ACL endpoint."""

import pytest
from fastapi.testclient import TestClient

from mqttacl.api import AclAPI
from mqttacl.audit import AuditLogger
from mqttacl.engine import CachedEvaluator
from mqttacl.models import Activity


@pytest.fixture
def acl_api(rule_set, fake_logger):
    return AclAPI(
        evaluator=CachedEvaluator(rule_set=rule_set),
        audit=AuditLogger(enabled=True, log_inputs=True, logger=fake_logger),
    )


@pytest.fixture
def client(acl_api):
    """Create test client backed by the sample rule set."""
    from mqttacl.main import create_app
    from mqttacl.routes import deps

    app = create_app()
    app.dependency_overrides[deps.get_acl_api] = lambda: acl_api

    return TestClient(app)


class TestMqttAclEndpoint:
    """Tests for POST /mqtt/acl."""

    def test_publish_allowed(self, client, fake_logger):
        response = client.post(
            "/mqtt/acl",
            headers={"X-Request-Id": "req-42"},
            json={
                "username": "sensor-gateway",
                "clientid": "gw-1",
                "topic": "sensors/room1/temp",
                "acc": 2,
                "qos": 1,
            },
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True, "reason": "authorized"}
        _, payload = fake_logger.calls[0]
        assert payload["request_id"] == "req-42"
        assert payload["source_service"] == "mosquitto"

    def test_publish_default_deny(self, client):
        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/room1/humidity", "acc": 2},
        )

        assert response.status_code == 403
        data = response.json()
        assert data["ok"] is False
        assert data["reason"] == "publish denied"

    def test_retained_publish_denied(self, client):
        response = client.post(
            "/mqtt/acl",
            json={
                "username": "sensor-gateway",
                "topic": "sensors/room1/temp",
                "acc": 2,
                "retain": True,
            },
        )

        assert response.status_code == 403

    def test_qos_outside_rule_denied(self, client):
        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/room1/temp", "acc": 2, "qos": 2},
        )

        assert response.status_code == 403

    @pytest.mark.parametrize("acc", [1, 4, 5])
    def test_subscribe_and_read_allowed(self, client, acc):
        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/#", "acc": acc},
        )

        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_combined_acc_requires_every_activity(self, client, fake_logger):
        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/room1/temp", "acc": 6},
        )

        # Subscribe is accepted, publish at QoS 0 not retained is accepted too
        assert response.status_code == 200
        assert len(fake_logger.calls) == 2

        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/room1/light", "acc": 6},
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "publish denied"

    def test_unknown_user_gets_default(self, client):
        response = client.post(
            "/mqtt/acl",
            json={"username": "stranger", "topic": "sensors/room1/temp", "acc": 4},
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "subscribe denied"

    def test_unknown_acc(self, client):
        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/#", "acc": 8},
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "unknown access type"

    def test_evaluation_error_returns_500(self, client, acl_api, monkeypatch):
        def broken(**kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(acl_api, "evaluate", broken)

        response = client.post(
            "/mqtt/acl",
            json={"username": "sensor-gateway", "topic": "sensors/#", "acc": 4},
        )

        assert response.status_code == 500
        assert response.json() == {"ok": False, "reason": "acl error: boom"}

    def test_invalid_body(self, client):
        response = client.post("/mqtt/acl", json={"topic": "a"})
        assert response.status_code == 422


class TestAccBitmaskConversion:
    """Tests for _acc_to_activities helper."""

    def test_acc_read_checks_subscription(self):
        from mqttacl.routes.mqtt import _acc_to_activities

        assert _acc_to_activities(1) == [Activity.SUBSCRIBE]

    def test_acc_publish_only(self):
        from mqttacl.routes.mqtt import _acc_to_activities

        assert _acc_to_activities(2) == [Activity.PUBLISH]

    def test_acc_subscribe_only(self):
        from mqttacl.routes.mqtt import _acc_to_activities

        assert _acc_to_activities(4) == [Activity.SUBSCRIBE]

    def test_acc_all(self):
        from mqttacl.routes.mqtt import _acc_to_activities

        assert _acc_to_activities(7) == [Activity.SUBSCRIBE, Activity.PUBLISH]

    def test_acc_zero(self):
        from mqttacl.routes.mqtt import _acc_to_activities

        assert _acc_to_activities(0) == []
