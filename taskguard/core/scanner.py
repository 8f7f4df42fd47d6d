"""
TaskGuard Content Scanner

Runs the rule registry over already-loaded documents:

    documents -> matcher -> skip filter -> finding builder -> findings

The scanner never reads files itself. Documents come from a task source
(see taskguard.sources.tasks) that owns discovery and read failures.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional

from taskguard.core.finding import Finding, truncate_match
from taskguard.core.matcher import RawMatch, surviving_matches
from taskguard.core.rules import DEFAULT_REGISTRY, RuleRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    identity: str
    content: str


def line_number_at(content: str, offset: int) -> int:
    """1-based line of ``offset``: newlines strictly before it, plus one."""
    return content.count("\n", 0, offset) + 1


def build_finding(document: Document, raw: RawMatch) -> Finding:
    rule = raw.rule
    return Finding(
        severity=rule.severity,
        rule_id=rule.id,
        rule_name=rule.name,
        description=rule.description,
        file=document.identity,
        line=line_number_at(document.content, raw.start),
        match=truncate_match(raw.text),
    )


class ContentScanner:
    """
    Scans documents against every rule in a registry.

    Findings come back ordered by document, then severity tier, then rule
    declaration order, then pattern order, then position. With
    ``workers > 1`` documents are scanned on a thread pool; the result is
    identical to a sequential scan.
    """

    name: str = "content"

    def __init__(self, registry: Optional[RuleRegistry] = None, workers: int = 1) -> None:
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.workers = max(1, workers)

    def scan_document(self, document: Document) -> List[Finding]:
        findings: List[Finding] = []
        for rule in self.registry:
            for raw in surviving_matches(document.content, rule):
                findings.append(build_finding(document, raw))
        logger.debug("Scanned %s: %d finding(s)", document.identity, len(findings))
        return findings

    def scan(self, documents: Iterable[Document]) -> List[Finding]:
        """
        Scan every document and collect all findings.

        Raises:
            ConfigurationError: if any rule pattern cannot be compiled. The
                whole scan is aborted rather than running without a detector.
        """
        self.registry.validate()
        documents = list(documents)

        if self.workers == 1 or len(documents) < 2:
            per_document = [self.scan_document(doc) for doc in documents]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                # map() yields results in submission order
                per_document = list(pool.map(self.scan_document, documents))

        findings: List[Finding] = []
        for batch in per_document:
            findings.extend(batch)
        return findings
