"""Topic pattern matching package."""

from .matcher import (
    MULTI_LEVEL_WILDCARD,
    SINGLE_LEVEL_WILDCARD,
    match_levels,
    matches,
    normalize_topic,
    split_topic,
    validate_pattern,
)

__all__ = [
    "MULTI_LEVEL_WILDCARD",
    "SINGLE_LEVEL_WILDCARD",
    "match_levels",
    "matches",
    "normalize_topic",
    "split_topic",
    "validate_pattern",
]
