"""Rule set loading package."""

from .loader import PrincipalConfig, RuleSet, RuleSetConfig, RuleSetError, load_rule_set

__all__ = [
    "PrincipalConfig",
    "RuleSet",
    "RuleSetConfig",
    "RuleSetError",
    "load_rule_set",
]
