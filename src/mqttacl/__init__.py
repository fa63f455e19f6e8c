"""Topic access control for MQTT publish and subscribe operations."""

from mqttacl.engine import check_publish, check_subscription, evaluate
from mqttacl.models import (
    Activity,
    AuthorizationBehaviour,
    AuthorizationResult,
    PermissionType,
    PublishAttempt,
    Qos,
    RetainScope,
    SubscribeAttempt,
    TopicPermission,
)
from mqttacl.topic import matches

__all__ = [
    "Activity",
    "AuthorizationBehaviour",
    "AuthorizationResult",
    "PermissionType",
    "PublishAttempt",
    "Qos",
    "RetainScope",
    "SubscribeAttempt",
    "TopicPermission",
    "check_publish",
    "check_subscription",
    "evaluate",
    "matches",
]
