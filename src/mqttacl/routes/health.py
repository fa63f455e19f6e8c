"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from mqttacl.engine import CachedEvaluator
from mqttacl.models import HealthResponse
from mqttacl.routes.deps import get_evaluator

VERSION = "0.1.0"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(evaluator: CachedEvaluator = Depends(get_evaluator)) -> HealthResponse:
    """Liveness check - is the service running?"""
    rule_set = evaluator.rule_set
    return HealthResponse(
        status="healthy" if rule_set.is_loaded else "unhealthy",
        version=VERSION,
        rules_loaded=rule_set.is_loaded,
        details={
            "principal_count": rule_set.principal_count,
        },
    )


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(evaluator: CachedEvaluator = Depends(get_evaluator)) -> HealthResponse:
    """Readiness check - is the service ready to accept requests?"""
    rule_set = evaluator.rule_set
    is_ready = rule_set.is_loaded and rule_set.principal_count > 0

    details: dict[str, Any] = {
        "rules_file": str(rule_set.source) if rule_set.source else None,
        "principal_count": rule_set.principal_count,
        "permission_count": rule_set.permission_count,
        "default_behaviour": rule_set.default_behaviour.value,
    }

    if evaluator.cache_enabled:
        details["cache"] = evaluator.cache_stats

    return HealthResponse(
        status="healthy" if is_ready else "unhealthy",
        version=VERSION,
        rules_loaded=rule_set.is_loaded,
        details=details,
    )
