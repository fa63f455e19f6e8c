"""Rule sets loaded from YAML.

Example YAML structure:
    default_behaviour: deny       # principals not listed below

    principals:
      - name: sensor-gateway
        default_behaviour: deny
        permissions:
          - topic: sensors/+/temp
            activity: publish
            qos: [0, 1]
            retain: not_retained
            type: allow
          - topic: ${SITE_PREFIX:-site}/#   # env vars are resolved
            activity: subscribe
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mqttacl.models import AuthorizationBehaviour, AuthorizationResult, TopicPermission

logger = logging.getLogger(__name__)


# Pattern for ${VAR} and ${VAR:-default} interpolation
_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(:-([^}]*))?\}")


class RuleSetError(ValueError):
    """Rule file could not be turned into a rule set."""

    pass


def _resolve_env_str(s: str) -> str:
    """Resolve environment variable placeholders in a string."""
    def repl(m: re.Match[str]) -> str:
        var = m.group(1)
        default = m.group(3)
        val = os.getenv(var)
        if val is None or val == "":
            return default if default is not None else ""
        return val

    return _ENV_PATTERN.sub(repl, s)


def _resolve_env(value: Any) -> Any:
    """Recursively resolve environment variables in a data structure."""
    if isinstance(value, str):
        return _resolve_env_str(value)
    if isinstance(value, list):
        return [_resolve_env(v) for v in value]
    if isinstance(value, dict):
        return {k: _resolve_env(v) for k, v in value.items()}
    return value


def _lower(v: Any) -> Any:
    return v.strip().lower() if isinstance(v, str) else v


class PrincipalConfig(BaseModel):
    """Permissions for one username."""

    name: str = Field(..., min_length=1, description="MQTT username")
    default_behaviour: AuthorizationBehaviour = Field(
        default=AuthorizationBehaviour.DENY,
        description="Decision when no permission matches",
    )
    permissions: list[TopicPermission] = Field(
        default_factory=list, description="Permissions in priority order"
    )

    @field_validator("default_behaviour", mode="before")
    @classmethod
    def _lowercase_default(cls, v: Any) -> Any:
        return _lower(v)

    def to_result(self) -> AuthorizationResult:
        return AuthorizationResult(
            permissions=tuple(self.permissions),
            default_behaviour=self.default_behaviour,
        )


class RuleSetConfig(BaseModel):
    """Top-level rule file."""

    default_behaviour: AuthorizationBehaviour = Field(
        default=AuthorizationBehaviour.DENY,
        description="Decision for principals not listed",
    )
    principals: list[PrincipalConfig] = Field(default_factory=list)

    @field_validator("default_behaviour", mode="before")
    @classmethod
    def _lowercase_default(cls, v: Any) -> Any:
        return _lower(v)

    @field_validator("principals")
    @classmethod
    def _unique_names(cls, v: list[PrincipalConfig]) -> list[PrincipalConfig]:
        seen: set[str] = set()
        for principal in v:
            if principal.name in seen:
                raise ValueError(f"Duplicate principal: {principal.name}")
            seen.add(principal.name)
        return v


class RuleSet:
    """Resolved, read-only rule sets keyed by principal."""

    def __init__(
        self,
        results: dict[str, AuthorizationResult] | None = None,
        default_behaviour: AuthorizationBehaviour = AuthorizationBehaviour.DENY,
        source: Path | None = None,
    ):
        self._results = dict(results or {})
        self._fallback = AuthorizationResult(default_behaviour=default_behaviour)
        self._source = source

    @classmethod
    def from_config(cls, config: RuleSetConfig, source: Path | None = None) -> "RuleSet":
        return cls(
            results={p.name: p.to_result() for p in config.principals},
            default_behaviour=config.default_behaviour,
            source=source,
        )

    @property
    def default_behaviour(self) -> AuthorizationBehaviour:
        return self._fallback.default_behaviour

    @property
    def source(self) -> Path | None:
        return self._source

    @property
    def is_loaded(self) -> bool:
        """Whether the rules came from a rule file."""
        return self._source is not None

    @property
    def principals(self) -> list[str]:
        return list(self._results)

    @property
    def principal_count(self) -> int:
        return len(self._results)

    @property
    def permission_count(self) -> int:
        return sum(len(r.permissions or ()) for r in self._results.values())

    def for_principal(self, principal: str) -> AuthorizationResult:
        """Return the principal's rules, or an empty result for unknown ones."""
        return self._results.get(principal, self._fallback)


def load_rule_set(path: str | Path) -> RuleSet:
    """Load a rule set from a YAML file with env var interpolation.

    Raises:
        FileNotFoundError: If the file does not exist
        RuleSetError: If the file is not a valid rule set
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Rule file not found: {path}")

    try:
        raw = yaml.safe_load(p.read_text())
    except yaml.YAMLError as e:
        raise RuleSetError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RuleSetError(f"Rule file must be a YAML mapping: {path}")

    try:
        config = RuleSetConfig.model_validate(_resolve_env(raw))
    except ValidationError as e:
        raise RuleSetError(f"Invalid rule file {path}: {e}") from e

    rule_set = RuleSet.from_config(config, source=p)
    logger.info(
        "Loaded rule set file=%s principals=%s permissions=%s",
        p,
        rule_set.principal_count,
        rule_set.permission_count,
    )
    return rule_set
