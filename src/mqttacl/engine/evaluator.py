"""Authorization evaluator: first matching permission wins.

Rule order is priority order. A broad ``allow a/#`` listed before a narrow
``deny a/b`` accepts a publish to ``a/b``; the evaluator never looks for the
most specific rule.
"""

from mqttacl.models import (
    Attempt,
    AuthorizationBehaviour,
    AuthorizationResult,
    PermissionType,
    PublishAttempt,
    Qos,
    SubscribeAttempt,
)
from mqttacl.topic import normalize_topic, split_topic


def evaluate(attempt: Attempt, result: AuthorizationResult) -> AuthorizationBehaviour:
    """Evaluate an attempted publish or subscribe against a rule set.

    Args:
        attempt: The attempted operation
        result: Ordered permissions and default behaviour

    Returns:
        ACCEPT or DENY
    """
    permissions = result.permissions
    if not permissions:
        return result.default_behaviour

    topic = normalize_topic(attempt.topic)
    levels = split_topic(topic)
    activity = attempt.activity
    retained = attempt.retained

    for permission in permissions:
        if permission.implies(topic, levels, attempt.qos, activity, retained):
            if permission.type is PermissionType.ALLOW:
                return AuthorizationBehaviour.ACCEPT
            return AuthorizationBehaviour.DENY

    return result.default_behaviour


def check_publish(
    topic: str,
    qos: Qos | int,
    retained: bool,
    result: AuthorizationResult,
) -> AuthorizationBehaviour:
    """Check whether a publish is permitted."""
    return evaluate(PublishAttempt(topic=topic, qos=Qos(qos), retained=retained), result)


def check_subscription(
    topic: str,
    qos: Qos | int,
    result: AuthorizationResult,
) -> AuthorizationBehaviour:
    """Check whether a subscription is permitted."""
    return evaluate(SubscribeAttempt(topic=topic, qos=Qos(qos)), result)
