"""API request and response models."""

from typing import Any, Literal

from pydantic import BaseModel, Field


# --- MQTT-specific (mosquitto-go-auth compatible) ---


class MqttAclRequest(BaseModel):
    """MQTT ACL check request (mosquitto-go-auth format).

    ``qos`` and ``retain`` are optional extensions; mosquitto-go-auth does
    not send them, so plain requests are checked at QoS 0, not retained.
    """

    username: str = Field(..., description="Username the rule set is resolved for")
    clientid: str = Field(default="", description="MQTT client ID")
    topic: str = Field(..., description="MQTT topic")
    acc: int = Field(
        ..., description="Access type bitmask (1=read, 2=publish, 4=subscribe)"
    )
    qos: Literal[0, 1, 2] = Field(default=0, description="Requested QoS")
    retain: bool = Field(default=False, description="Retain flag of a publish")


class MqttResponse(BaseModel):
    """MQTT acl response.

    mosquitto-go-auth expects HTTP 200 for allow, 4xx for deny.
    We return a body for debugging purposes.
    """

    ok: bool
    reason: str = ""


# --- Health ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    rules_loaded: bool
    details: dict[str, Any] = Field(default_factory=dict)
