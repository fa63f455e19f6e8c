"""MQTT ACL endpoint (mosquitto-go-auth compatible)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response, status

from mqttacl.api import AclAPI
from mqttacl.models import (
    Activity,
    MqttAclRequest,
    MqttResponse,
    PublishAttempt,
    Qos,
    SubscribeAttempt,
)
from mqttacl.routes.deps import get_acl_api

router = APIRouter(prefix="/mqtt", tags=["mqtt"])


def _acc_to_activities(acc: int) -> list[Activity]:
    """Convert mosquitto acc bitmask to the activities to check.

    Bitmask values:
    - 1 = read (delivery to a subscriber, checked as a subscription)
    - 2 = publish
    - 4 = subscribe
    """
    activities: list[Activity] = []
    if acc & 0x04 or acc & 0x01:
        activities.append(Activity.SUBSCRIBE)
    if acc & 0x02:
        activities.append(Activity.PUBLISH)
    return activities


@router.post("/acl")
async def mqtt_acl(
    request: MqttAclRequest,
    response: Response,
    api: AclAPI = Depends(get_acl_api),
    x_request_id: Annotated[str | None, Header()] = None,
) -> MqttResponse:
    """MQTT ACL check endpoint.

    mosquitto-go-auth calls this for every publish/subscribe action.
    Every activity in the bitmask must be accepted.

    Returns:
    - 200 + ok=true if authorized
    - 403 + ok=false if not authorized
    """
    request_id = x_request_id or str(uuid.uuid4())

    activities = _acc_to_activities(request.acc)
    if not activities:
        response.status_code = status.HTTP_403_FORBIDDEN
        return MqttResponse(ok=False, reason="unknown access type")

    qos = Qos(request.qos)
    for activity in activities:
        if activity is Activity.PUBLISH:
            attempt = PublishAttempt(topic=request.topic, qos=qos, retained=request.retain)
        else:
            attempt = SubscribeAttempt(topic=request.topic, qos=qos)

        try:
            result = api.evaluate(
                request_id=request_id,
                principal=request.username,
                attempt=attempt,
                source_service="mosquitto",
            )
        except Exception as e:
            # Already audited by AclAPI
            response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            return MqttResponse(ok=False, reason=f"acl error: {e}")

        if not result.allowed:
            response.status_code = status.HTTP_403_FORBIDDEN
            return MqttResponse(ok=False, reason=f"{activity.value} denied")

    return MqttResponse(ok=True, reason="authorized")
