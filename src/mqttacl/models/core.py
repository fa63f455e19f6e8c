"""Core domain models for topic access control."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mqttacl.topic import match_levels, split_topic, validate_pattern


class Activity(str, Enum):
    """Operation a permission applies to."""

    PUBLISH = "publish"
    SUBSCRIBE = "subscribe"
    ALL = "all"


class PermissionType(str, Enum):
    """Effect of a matching permission."""

    ALLOW = "allow"
    DENY = "deny"


class AuthorizationBehaviour(str, Enum):
    """Outcome of an authorization check."""

    ACCEPT = "accept"
    DENY = "deny"


class Qos(IntEnum):
    """MQTT quality-of-service levels."""

    AT_MOST_ONCE = 0
    AT_LEAST_ONCE = 1
    EXACTLY_ONCE = 2


class RetainScope(str, Enum):
    """Which publishes a permission covers with respect to the retain flag."""

    RETAINED = "retained"
    NOT_RETAINED = "not_retained"
    ALL = "all"

    def includes(self, retained: bool) -> bool:
        if self is RetainScope.ALL:
            return True
        return retained == (self is RetainScope.RETAINED)


ALL_QOS: frozenset[Qos] = frozenset(Qos)


@lru_cache(maxsize=4096)
def _pattern_levels(pattern: str) -> tuple[str, ...]:
    return tuple(split_topic(pattern))


def _qos_level(item: Any) -> Any:
    if isinstance(item, str) and item.strip().isdigit():
        return int(item)
    return item


class TopicPermission(BaseModel):
    """A single immutable topic rule.

    The pattern is validated when the permission is built; a malformed
    pattern never reaches evaluation.
    """

    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., description="Topic pattern, may contain + and #")
    activity: Activity = Field(default=Activity.ALL, description="Publish, subscribe or both")
    qos: frozenset[Qos] = Field(default=ALL_QOS, description="QoS levels the rule covers")
    retain: RetainScope = Field(
        default=RetainScope.ALL, description="Retained applicability (publish only)"
    )
    type: PermissionType = Field(default=PermissionType.ALLOW, description="Allow or deny")

    @field_validator("topic")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        return validate_pattern(v)

    @field_validator("activity", "retain", "type", mode="before")
    @classmethod
    def _lowercase_names(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("qos", mode="before")
    @classmethod
    def _expand_qos(cls, v: Any) -> Any:
        # Strings come from env interpolation: "all", "1" or "0,1"
        if v is None or (isinstance(v, str) and v.strip().lower() == "all"):
            return ALL_QOS
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        if isinstance(v, int):
            return [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            return [_qos_level(item) for item in v]
        return v

    @field_validator("qos")
    @classmethod
    def _require_qos(cls, v: frozenset[Qos]) -> frozenset[Qos]:
        if not v:
            raise ValueError("At least one QoS level is required")
        return v

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = False) -> "TopicPermission":
        """Copy the permission, validating any updated fields."""
        if not update:
            return super().model_copy(deep=deep)
        return type(self).model_validate({**self.model_dump(), **update})

    def implies(
        self,
        topic: str,
        split_topic: list[str],
        qos: Qos | int,
        activity: Activity,
        retained: bool | None = None,
    ) -> bool:
        """Check whether this permission applies to an attempted operation.

        Args:
            topic: Normalised topic of the attempt
            split_topic: ``topic`` split into levels
            qos: Requested QoS
            activity: ``Activity.PUBLISH`` or ``Activity.SUBSCRIBE``
            retained: Retain flag, only consulted for publishes
        """
        activity = Activity(activity)
        if self.activity != Activity.ALL and self.activity != activity:
            return False
        if qos not in self.qos:
            return False
        if activity == Activity.PUBLISH and retained is not None:
            if not self.retain.includes(retained):
                return False
        return match_levels(_pattern_levels(self.topic), split_topic)


class AuthorizationResult(BaseModel):
    """Ordered permissions plus the behaviour used when none of them match.

    Order is priority: the first matching permission decides.
    """

    model_config = ConfigDict(frozen=True)

    permissions: tuple[TopicPermission, ...] | None = Field(
        default=None, description="Permissions in priority order"
    )
    default_behaviour: AuthorizationBehaviour = Field(
        default=AuthorizationBehaviour.DENY,
        description="Returned when no permission matches",
    )


@dataclass(frozen=True)
class PublishAttempt:
    """A client trying to publish."""

    topic: str
    qos: Qos
    retained: bool = False

    @property
    def activity(self) -> Activity:
        return Activity.PUBLISH


@dataclass(frozen=True)
class SubscribeAttempt:
    """A client trying to subscribe."""

    topic: str
    qos: Qos

    @property
    def activity(self) -> Activity:
        return Activity.SUBSCRIBE

    @property
    def retained(self) -> None:
        return None


Attempt = PublishAttempt | SubscribeAttempt


class AuditRecord(BaseModel):
    """Audit log entry for an ACL decision."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: str = Field(..., description="Unique request identifier")
    principal: str = Field(..., description="Username or client the rules were resolved for")
    activity: Activity = Field(..., description="Publish or subscribe")
    topic: str = Field(..., description="Topic as supplied by the caller")
    qos: Qos = Field(..., description="Requested QoS")
    retained: bool | None = Field(None, description="Retain flag (publishes only)")
    behaviour: AuthorizationBehaviour = Field(..., description="Decision")
    latency_ms: float = Field(..., description="Evaluation latency in milliseconds")
    cached: bool = Field(default=False, description="Whether result was from cache")
    source_service: str | None = Field(None, description="Calling service identifier")
