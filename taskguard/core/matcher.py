"""
TaskGuard Content Matcher

Applies one rule's patterns to one document's text and filters out
known-benign matches with the rule's skip patterns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from taskguard.core.rules import PatternSpec, Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawMatch:
    rule: Rule
    pattern: PatternSpec
    start: int
    text: str


def find_matches(content: str, rule: Rule) -> Iterator[RawMatch]:
    """
    Yield every non-overlapping match of every pattern of ``rule``.

    Patterns are applied in declaration order and each one gets a fresh
    ``finditer`` cursor, so nothing carries over between patterns,
    documents or threads.
    """
    for spec, regex in rule.compiled():
        for match in regex.finditer(content):
            yield RawMatch(rule=rule, pattern=spec, start=match.start(), text=match.group(0))


def is_suppressed(raw: RawMatch) -> bool:
    """Return True when a skip pattern matches the matched text itself."""
    for skip in raw.rule.compiled_skips():
        if skip.search(raw.text):
            logger.debug("Suppressed %s match %r via %r", raw.rule.id, raw.text, skip.pattern)
            return True
    return False


def surviving_matches(content: str, rule: Rule) -> Iterator[RawMatch]:
    """Matches of ``rule`` in ``content`` that no skip pattern rules out."""
    for raw in find_matches(content, rule):
        if not is_suppressed(raw):
            yield raw
