"""Decision cache for ACL evaluation results."""

import hashlib
import json
import threading
from typing import Any

import structlog
from cachetools import TTLCache

from mqttacl.models import Attempt, AuthorizationBehaviour
from mqttacl.rules import RuleSet
from mqttacl.topic import normalize_topic

from .evaluator import evaluate

logger = structlog.get_logger()


class DecisionCache:
    """LRU + TTL cache for ACL decisions.

    Thread-safe implementation using cachetools.
    """

    def __init__(self, maxsize: int = 10000, ttl_seconds: int = 300):
        """Initialize the cache.

        Args:
            maxsize: Maximum number of entries
            ttl_seconds: Time-to-live in seconds
        """
        self._cache: TTLCache[str, AuthorizationBehaviour] = TTLCache(
            maxsize=maxsize, ttl=ttl_seconds
        )
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, principal: str, attempt: Attempt) -> AuthorizationBehaviour | None:
        """Get a cached decision.

        Args:
            principal: Principal the rules were resolved for
            attempt: Attempted operation

        Returns:
            Cached behaviour or None
        """
        key = self._make_key(principal, attempt)
        with self._lock:
            result = self._cache.get(key)
            if result is not None:
                self._hits += 1
                logger.debug("Cache hit", principal=principal, key=key[:16])
            else:
                self._misses += 1
            return result

    def set(
        self, principal: str, attempt: Attempt, behaviour: AuthorizationBehaviour
    ) -> None:
        """Cache a decision."""
        key = self._make_key(principal, attempt)
        with self._lock:
            self._cache[key] = behaviour
            logger.debug("Cache set", principal=principal, key=key[:16])

    def invalidate(self, principal: str | None = None) -> int:
        """Invalidate cache entries.

        Args:
            principal: If provided, only invalidate this principal's entries.
                   If None, clear entire cache.

        Returns:
            Number of entries invalidated
        """
        with self._lock:
            if principal is None:
                count = len(self._cache)
                self._cache.clear()
                logger.info("Cache cleared", entries=count)
                return count

            prefix = f"{self._principal_digest(principal)}:"
            keys_to_remove = [k for k in self._cache if k.startswith(prefix)]
            for key in keys_to_remove:
                del self._cache[key]
            logger.info(
                "Cache invalidated", principal=principal, entries=len(keys_to_remove)
            )
            return len(keys_to_remove)

    @property
    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = self._hits / total if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "maxsize": self._cache.maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 3),
            }

    @staticmethod
    def _principal_digest(principal: str) -> str:
        return hashlib.sha256(principal.encode()).hexdigest()[:16]

    def _make_key(self, principal: str, attempt: Attempt) -> str:
        """Generate cache key from principal and attempt.

        Topics are normalised first so ``a/b/`` and ``a/b`` share an entry.
        """
        content = json.dumps(
            [
                attempt.activity.value,
                normalize_topic(attempt.topic),
                int(attempt.qos),
                attempt.retained,
            ]
        )
        digest = hashlib.sha256(content.encode()).hexdigest()[:32]
        return f"{self._principal_digest(principal)}:{digest}"


class CachedEvaluator:
    """Rule set evaluation with integrated caching."""

    def __init__(
        self,
        rule_set: RuleSet,
        cache: DecisionCache | None = None,
        cache_enabled: bool = True,
    ):
        """Initialize cached evaluator.

        Args:
            rule_set: Rules resolved per principal
            cache: Optional cache instance (creates default if None)
            cache_enabled: Whether caching is enabled
        """
        self._rule_set = rule_set
        self._cache = cache or DecisionCache()
        self._cache_enabled = cache_enabled

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def evaluate(
        self,
        principal: str,
        attempt: Attempt,
        skip_cache: bool = False,
    ) -> tuple[AuthorizationBehaviour, bool]:
        """Evaluate an attempt for a principal with caching.

        Args:
            principal: Username to resolve rules for
            attempt: Attempted operation
            skip_cache: If True, bypass cache

        Returns:
            Tuple of (behaviour, was_cached)
        """
        use_cache = self._cache_enabled and not skip_cache

        if use_cache:
            cached = self._cache.get(principal, attempt)
            if cached is not None:
                return cached, True

        behaviour = evaluate(attempt, self._rule_set.for_principal(principal))

        if use_cache:
            self._cache.set(principal, attempt, behaviour)

        return behaviour, False

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    @property
    def cache_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        return self._cache.stats
