"""ACL service API layer.

This module centralizes:
- per-principal rule resolution and evaluation (with caching)
- audit logging
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from mqttacl.audit import AuditLogger
from mqttacl.engine import CachedEvaluator
from mqttacl.models import Attempt, AuthorizationBehaviour


@dataclass(frozen=True)
class EvaluationResult:
    behaviour: AuthorizationBehaviour
    cached: bool
    latency_ms: float

    @property
    def allowed(self) -> bool:
        return self.behaviour is AuthorizationBehaviour.ACCEPT


class AclAPI:
    def __init__(self, *, evaluator: CachedEvaluator, audit: AuditLogger):
        self._evaluator = evaluator
        self._audit = audit

    @property
    def evaluator(self) -> CachedEvaluator:
        return self._evaluator

    def evaluate(
        self,
        *,
        request_id: str,
        principal: str,
        attempt: Attempt,
        source_service: str | None = None,
        skip_cache: bool = False,
    ) -> EvaluationResult:
        start = time.perf_counter()
        try:
            behaviour, cached = self._evaluator.evaluate(
                principal, attempt, skip_cache=skip_cache
            )
            latency_ms = (time.perf_counter() - start) * 1000
            self._audit.log_decision(
                request_id=request_id,
                principal=principal,
                attempt=attempt,
                behaviour=behaviour,
                latency_ms=latency_ms,
                cached=cached,
                source_service=source_service,
            )
            return EvaluationResult(behaviour=behaviour, cached=cached, latency_ms=latency_ms)
        except Exception as e:
            self._audit.log_error(
                request_id=request_id,
                error=str(e),
                principal=principal,
                attempt=attempt,
                source_service=source_service,
            )
            raise
