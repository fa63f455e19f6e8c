"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from mqttacl.models import Activity, AuthorizationResult, PermissionType, TopicPermission
from mqttacl.rules import RuleSet, load_rule_set


RULES_YAML = """\
default_behaviour: deny

principals:
  - name: sensor-gateway
    default_behaviour: deny
    permissions:
      - topic: sensors/+/temp
        activity: publish
        qos: [0, 1]
        retain: not_retained
        type: allow
      - topic: sensors/#
        activity: subscribe
        type: allow

  - name: dashboard
    default_behaviour: accept
    permissions:
      - topic: admin/#
        type: deny
"""


class FakeStructLogger:
    def __init__(self):
        self.calls = []

    def info(self, **kwargs):
        self.calls.append(("info", kwargs))

    def warning(self, **kwargs):
        self.calls.append(("warning", kwargs))

    def error(self, **kwargs):
        self.calls.append(("error", kwargs))


@pytest.fixture
def rules_file(tmp_path) -> Path:
    """Path to a rules file with two principals."""
    path = tmp_path / "acl.yaml"
    path.write_text(RULES_YAML)
    return path


@pytest.fixture
def rule_set(rules_file) -> RuleSet:
    return load_rule_set(rules_file)


@pytest.fixture
def fake_logger() -> FakeStructLogger:
    return FakeStructLogger()


@pytest.fixture
def sensor_result() -> AuthorizationResult:
    """Publish-only rule for sensor temperatures, deny by default."""
    return AuthorizationResult(
        permissions=(
            TopicPermission(
                topic="sensors/+/temp",
                activity=Activity.PUBLISH,
                type=PermissionType.ALLOW,
            ),
        ),
    )
