"""Bump rule evaluation.

A bump rule maps commit predicates to an increment kind. For a single
commit, rules are evaluated in configured order:

- a matching MAJOR rule decides MAJOR immediately
- a matching MINOR rule replaces any weaker or absent decision
- a matching PATCH rule applies only when nothing was decided yet

Across commits, decisions are folded into a running maximum per
version scope. Once a scope reaches MAJOR its remaining commits are
not evaluated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from tag_track.core.version import IncrementKind, strongest

if TYPE_CHECKING:
    from tag_track.config.models import BumpRule
    from tag_track.core.parsing import CommitDetails

logger = logging.getLogger(__name__)


def rule_matches(rule: BumpRule, details: CommitDetails) -> bool:
    """Return True if every predicate present on ``rule`` holds for ``details``.

    A rule without any predicate never matches.
    """
    checks: list[bool] = []

    if rule.types is not None:
        checks.append(details.commit_type in rule.types)
    if rule.scopes is not None:
        checks.append(details.scope is not None and details.scope in rule.scopes)
    if rule.if_breaking_field is not None:
        checks.append(details.breaking == rule.if_breaking_field)
    if rule.if_breaking_description is not None:
        checks.append(details.mentions_breaking_change == rule.if_breaking_description)

    return bool(checks) and all(checks)


def decide(details: CommitDetails, rules: Sequence[BumpRule]) -> IncrementKind | None:
    """Decide the increment implied by a single commit.

    Args:
        details: Parsed commit details
        rules: Bump rules in configured order

    Returns:
        The increment kind, or None if no rule matched
    """
    decision: IncrementKind | None = None

    for rule in rules:
        if not rule_matches(rule, details):
            continue

        if rule.bump is IncrementKind.MAJOR:
            return IncrementKind.MAJOR
        if rule.bump is IncrementKind.MINOR:
            decision = IncrementKind.MINOR
        elif decision is None:
            decision = IncrementKind.PATCH

    return decision


class BumpDecider:
    """Running per-scope maximum of commit decisions.

    The MAJOR short-circuit applies to each scope on its own; reaching
    MAJOR in one scope does not stop evaluation of other scopes.
    """

    def __init__(self, rules: Sequence[BumpRule]) -> None:
        self._rules = list(rules)
        self._decisions: dict[str, IncrementKind | None] = {}

    def feed(self, scope: str, details: CommitDetails) -> IncrementKind | None:
        """Fold one commit into ``scope`` and return the scope's decision so far."""
        current = self._decisions.get(scope)
        if current is IncrementKind.MAJOR:
            return current

        decision = decide(details, self._rules)
        logger.debug(
            "Commit %r (scope %r) decided %s",
            details.description.splitlines()[0],
            scope,
            decision,
        )
        self._decisions[scope] = strongest(current, decision)
        return self._decisions[scope]

    def decision(self, scope: str) -> IncrementKind | None:
        """Return the strongest increment seen for ``scope``."""
        return self._decisions.get(scope)

    def is_settled(self, scope: str) -> bool:
        """True once ``scope`` can no longer change (MAJOR reached)."""
        return self._decisions.get(scope) is IncrementKind.MAJOR
