"""Domain and API models."""

from .core import (
    ALL_QOS,
    Activity,
    Attempt,
    AuditRecord,
    AuthorizationBehaviour,
    AuthorizationResult,
    PermissionType,
    PublishAttempt,
    Qos,
    RetainScope,
    SubscribeAttempt,
    TopicPermission,
)
from .requests import HealthResponse, MqttAclRequest, MqttResponse

__all__ = [
    "ALL_QOS",
    "Activity",
    "Attempt",
    "AuditRecord",
    "AuthorizationBehaviour",
    "AuthorizationResult",
    "HealthResponse",
    "MqttAclRequest",
    "MqttResponse",
    "PermissionType",
    "PublishAttempt",
    "Qos",
    "RetainScope",
    "SubscribeAttempt",
    "TopicPermission",
]
