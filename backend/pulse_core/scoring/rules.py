"""Ordered rule tables used by the scorers.

A table is a tuple of ScoreRule entries evaluated top to bottom; the
first rule whose predicate holds decides the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class ScoreRule(Generic[T, R]):
    """One row of a rule table."""

    name: str
    predicate: Callable[[T], bool]
    value: R


def matching_rule(rules: Sequence[ScoreRule[T, R]], subject: T) -> ScoreRule[T, R] | None:
    """Return the first rule that matches ``subject``, if any."""
    for rule in rules:
        if rule.predicate(subject):
            return rule
    return None


def first_match(rules: Sequence[ScoreRule[T, R]], subject: T, default: R) -> R:
    """Return the value of the first matching rule, else ``default``."""
    rule = matching_rule(rules, subject)
    if rule is None:
        return default
    return rule.value


def clamp(value: int, limit: int) -> int:
    """Clamp ``value`` to [-limit, limit]."""
    return max(-limit, min(limit, value))
