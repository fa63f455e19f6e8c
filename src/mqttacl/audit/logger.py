"""Structured audit logging for ACL decisions."""

import logging
from datetime import datetime, timezone
from typing import Any

import structlog

from mqttacl.models import Attempt, AuditRecord, AuthorizationBehaviour


def _service_tagger(service_name: str):
    def add_service(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def configure_audit_logging(
    *,
    log_level: str | int,
    json_format: bool,
    service_name: str,
) -> None:
    """Configure structlog for audit events.

    Args:
        log_level: Level name or number, resolved through stdlib logging
        json_format: Render JSON lines instead of the development console format
        service_name: Added to every audit event as ``service``
    """
    if isinstance(log_level, str):
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        level = int(log_level)

    logging.basicConfig(level=level)

    processors = [
        _service_tagger(service_name),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """Audit logger for ACL decisions."""

    def __init__(
        self,
        enabled: bool = True,
        log_inputs: bool = True,
        logger: Any = None,
    ):
        """Initialize audit logger.

        Args:
            enabled: Whether audit logging is enabled
            log_inputs: Whether to log the full attempt (topics may be sensitive)
            logger: Optional custom logger
        """
        self._enabled = enabled
        self._log_inputs = log_inputs
        self._logger = logger or structlog.get_logger("audit")

    def log_decision(
        self,
        request_id: str,
        principal: str,
        attempt: Attempt,
        behaviour: AuthorizationBehaviour,
        latency_ms: float,
        cached: bool = False,
        source_service: str | None = None,
    ) -> AuditRecord:
        """Log an ACL decision.

        Args:
            request_id: Unique request identifier
            principal: Principal the rules were resolved for
            attempt: Attempted publish or subscribe
            behaviour: Decision
            latency_ms: Evaluation latency
            cached: Whether result was from cache
            source_service: Calling service identifier

        Returns:
            AuditRecord for the logged decision
        """
        record = AuditRecord(
            timestamp=datetime.now(timezone.utc),
            request_id=request_id,
            principal=principal,
            activity=attempt.activity,
            topic=attempt.topic,
            qos=attempt.qos,
            retained=attempt.retained,
            behaviour=behaviour,
            latency_ms=latency_ms,
            cached=cached,
            source_service=source_service,
        )

        if self._enabled:
            accepted = behaviour is AuthorizationBehaviour.ACCEPT
            log_data: dict[str, Any] = {
                "event": "acl_decision",
                "request_id": request_id,
                "allowed": accepted,
                "principal": principal,
                "activity": attempt.activity.value,
                "latency_ms": round(latency_ms, 2),
                "cached": cached,
            }

            if source_service:
                log_data["source_service"] = source_service

            if self._log_inputs:
                log_data["input"] = {
                    "topic": attempt.topic,
                    "qos": int(attempt.qos),
                    "retained": attempt.retained,
                }

            # Log at appropriate level
            if accepted:
                self._logger.info(**log_data)
            else:
                self._logger.warning(**log_data)

        return record

    def log_error(
        self,
        request_id: str,
        error: str,
        principal: str | None = None,
        attempt: Attempt | None = None,
        source_service: str | None = None,
    ) -> None:
        """Log an ACL evaluation error.

        Args:
            request_id: Unique request identifier
            error: Error message
            principal: Principal (if known)
            attempt: Attempted operation (if available)
            source_service: Calling service identifier
        """
        if not self._enabled:
            return

        log_data: dict[str, Any] = {
            "event": "acl_error",
            "request_id": request_id,
            "error": error,
        }

        if source_service:
            log_data["source_service"] = source_service

        if principal:
            log_data["principal"] = principal

        if attempt:
            log_data["activity"] = attempt.activity.value
            log_data["topic"] = attempt.topic

        self._logger.error(**log_data)
