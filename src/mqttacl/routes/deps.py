from mqttacl.api import AclAPI
from mqttacl.audit import AuditLogger
from mqttacl.config import Settings, settings as default_settings
from mqttacl.engine import CachedEvaluator, DecisionCache
from mqttacl.rules import load_rule_set


_evaluator: CachedEvaluator | None = None
_acl_api: AclAPI | None = None


async def init_deps(settings: Settings | None = None) -> None:

    global _evaluator, _acl_api

    settings = settings or default_settings

    rule_set = load_rule_set(settings.rules_file)

    cache = DecisionCache(
        maxsize=settings.decision_cache_maxsize,
        ttl_seconds=settings.decision_cache_ttl_seconds,
    )
    _evaluator = CachedEvaluator(
        rule_set=rule_set,
        cache=cache,
        cache_enabled=settings.decision_cache_enabled,
    )

    audit_logger = AuditLogger(
        enabled=settings.audit_enabled,
        log_inputs=settings.audit_log_inputs,
    )

    _acl_api = AclAPI(evaluator=_evaluator, audit=audit_logger)


def get_evaluator() -> CachedEvaluator:
    if _evaluator is None:
        raise RuntimeError("Evaluator not initialized")
    return _evaluator


def get_acl_api() -> AclAPI:
    if _acl_api is None:
        raise RuntimeError("ACL API not initialized")
    return _acl_api
