"""API layer for ACL evaluation."""

from .service import AclAPI, EvaluationResult

__all__ = [
    "AclAPI",
    "EvaluationResult",
]
