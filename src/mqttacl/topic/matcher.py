"""MQTT topic pattern validation and matching.

Topics and patterns are split on ``/`` preserving empty levels, so ``a//b``
has three levels and a leading or trailing ``/`` produces an empty level.
"""

from collections.abc import Sequence

SEPARATOR = "/"
SINGLE_LEVEL_WILDCARD = "+"
MULTI_LEVEL_WILDCARD = "#"


def validate_pattern(pattern: str) -> str:
    """Validate a topic pattern and return it unchanged.

    Raises:
        ValueError: If the pattern is empty, contains NUL, places ``#``
            anywhere but the final level, or mixes a wildcard with other
            characters inside one level.
    """
    if not pattern:
        raise ValueError("Topic pattern must not be empty")
    if "\x00" in pattern:
        raise ValueError(f"Topic pattern must not contain NUL: {pattern!r}")

    levels = pattern.split(SEPARATOR)
    last = len(levels) - 1
    for index, level in enumerate(levels):
        if len(level) > 1 and (
            SINGLE_LEVEL_WILDCARD in level or MULTI_LEVEL_WILDCARD in level
        ):
            raise ValueError(
                f"Wildcard must occupy an entire level: {pattern!r}"
            )
        if level == MULTI_LEVEL_WILDCARD and index != last:
            raise ValueError(
                f"'#' is only valid as the last level: {pattern!r}"
            )
    return pattern


def split_topic(topic: str) -> list[str]:
    """Split a topic or pattern into levels, keeping empty ones."""
    return topic.split(SEPARATOR)


def normalize_topic(topic: str) -> str:
    """Drop a single trailing ``/`` unless the topic is exactly ``/``."""
    if len(topic) > 1 and topic.endswith(SEPARATOR):
        return topic[:-1]
    return topic


def match_levels(pattern_levels: Sequence[str], topic_levels: Sequence[str]) -> bool:
    """Walk pattern and topic levels in lock-step."""
    topic_depth = len(topic_levels)
    for index, level in enumerate(pattern_levels):
        if level == MULTI_LEVEL_WILDCARD:
            return True
        if index >= topic_depth:
            return False
        if level == SINGLE_LEVEL_WILDCARD:
            continue
        if level != topic_levels[index]:
            return False
    return len(pattern_levels) == topic_depth


def matches(pattern: str, topic: str) -> bool:
    """Check whether ``topic`` matches ``pattern``.

    The topic is used as given; callers evaluating a rule set normalise it
    first with :func:`normalize_topic`.

    Examples:
        >>> matches("a/#", "a")
        True
        >>> matches("a/+", "a")
        False
    """
    return match_levels(split_topic(pattern), split_topic(topic))
