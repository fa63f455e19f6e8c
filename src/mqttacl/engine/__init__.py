"""ACL evaluation package."""

from .cache import CachedEvaluator, DecisionCache
from .evaluator import check_publish, check_subscription, evaluate

__all__ = [
    "CachedEvaluator",
    "DecisionCache",
    "check_publish",
    "check_subscription",
    "evaluate",
]
