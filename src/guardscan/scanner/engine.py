"""Pattern scanner — shared scan procedure for every analysis domain."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable, Sequence
from types import MappingProxyType

from guardscan.scanner.cache import DEFAULT_CACHE_SIZE, ContentCache, content_hash
from guardscan.scanner.models import (
    Finding,
    FindingKind,
    PatternRule,
    ScanResult,
)
from guardscan.scanner.rules.loader import RuleFilter
from guardscan.scanner.severity import highest

logger = logging.getLogger(__name__)

# Rules evaluated between event-loop yields in ascan()
RULE_BATCH_SIZE = 5

EXCERPT_LIMIT = 80

ContextFilter = tuple[tuple[str, ...], RuleFilter]


def occurrences(count: int) -> str:
    return f"(Found {count} occurrence{'s' if count > 1 else ''})"


class PatternScanner:
    """Runs a rule catalog over text and memoises results by content hash.

    Subclasses set the class attributes and pass their catalog to
    ``__init__``; most need nothing else.  ``scan`` never raises: a rule
    that blows up is logged and skipped.
    """

    domain = "generic"
    kind = FindingKind.VULNERABILITY
    context_sensitive = False

    def __init__(
        self,
        rules: Iterable[PatternRule],
        *,
        buckets: dict[str, str] | None = None,
        default_bucket: str = "issues",
        context_filters: Sequence[ContextFilter] = (),
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        self.rules: tuple[PatternRule, ...] = tuple(rules)
        self.buckets = dict(buckets or {})
        self.default_bucket = default_bucket
        self.context_filters = list(context_filters)
        self.cache: ContentCache[ScanResult] = ContentCache(cache_size)

        # Every result exposes the same bucket names, even when empty
        names = dict.fromkeys(self.buckets.values())
        names[default_bucket] = None
        self.bucket_names: tuple[str, ...] = tuple(names)

    # -- public API ----------------------------------------------------------

    def scan(self, text: str, context: str | None = None) -> ScanResult:
        context = self._normalize_context(context)
        if not text or not text.strip():
            return self.empty_result(context)

        key = self._cache_key(text, context)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("%s cache hit for %s", self.domain, key)
            return cached

        findings = [
            finding
            for rule in self._relevant_rules(context)
            if (finding := self._evaluate_rule(rule, text, context)) is not None
        ]
        result = self._finish(text, findings, context)
        self.cache.put(key, result)
        return result

    async def ascan(self, text: str, context: str | None = None) -> ScanResult:
        """Same as :meth:`scan`, yielding to the event loop between rule batches."""
        context = self._normalize_context(context)
        if not text or not text.strip():
            return self.empty_result(context)

        key = self._cache_key(text, context)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("%s cache hit for %s", self.domain, key)
            return cached

        rules = self._relevant_rules(context)
        findings: list[Finding] = []
        for start in range(0, len(rules), RULE_BATCH_SIZE):
            if start:
                await asyncio.sleep(0)
            for rule in rules[start : start + RULE_BATCH_SIZE]:
                finding = self._evaluate_rule(rule, text, context)
                if finding is not None:
                    findings.append(finding)

        result = self._finish(text, findings, context)
        self.cache.put(key, result)
        return result

    def clear_cache(self) -> None:
        self.cache.clear()

    def empty_result(self, context: str = "") -> ScanResult:
        return ScanResult(
            domain=self.domain,
            buckets=self._freeze_buckets({}),
            context=context,
        )

    # -- hooks ---------------------------------------------------------------

    def describe(self, rule: PatternRule, match: str, count: int) -> str:
        return f"{rule.message} {occurrences(count)}"

    def excerpt(self, match: str) -> str:
        match = match.strip()
        if len(match) > EXCERPT_LIMIT:
            return match[: EXCERPT_LIMIT - 3] + "..."
        return match

    def extra_findings(self, text: str, context: str) -> list[Finding]:
        """Findings that do not come from a single pattern (none by default)."""
        return []

    def build_result(
        self,
        text: str,
        findings: tuple[Finding, ...],
        buckets: MappingProxyType,
        context: str,
    ) -> ScanResult:
        return ScanResult(
            domain=self.domain,
            findings=findings,
            buckets=buckets,
            severity=highest(findings),
            context=context,
        )

    def bucket_for(self, rule_category: str, context: str) -> str:
        return self.buckets.get(rule_category, self.default_bucket)

    # -- internals -----------------------------------------------------------

    def _normalize_context(self, context: str | None) -> str:
        if not self.context_sensitive or not context:
            return ""
        return context.strip().lower()

    def _cache_key(self, text: str, context: str) -> str:
        return content_hash(text, context or None)

    def _relevant_rules(self, context: str) -> tuple[PatternRule, ...]:
        if context:
            for keywords, keep in self.context_filters:
                if any(word in context for word in keywords):
                    return tuple(rule for rule in self.rules if keep(rule))
        return self.rules

    def _evaluate_rule(
        self, rule: PatternRule, text: str, context: str
    ) -> Finding | None:
        try:
            matches = list(rule.regex.finditer(text))
            if not matches or len(matches) < rule.min_matches:
                return None
            first = matches[0]
            line, column = _position(text, first)
            return Finding(
                kind=self.kind,
                type=rule.type,
                severity=rule.severity,
                description=self.describe(rule, first.group(0), len(matches)),
                category=rule.category,
                rule_id=rule.rule_id,
                count=len(matches),
                source_label=context,
                line=line,
                column=column,
                excerpt=self.excerpt(first.group(0)),
            )
        except Exception:
            logger.exception(
                "Rule %s failed during %s scan, skipping", rule.rule_id, self.domain
            )
            return None

    def _finish(
        self, text: str, findings: list[Finding], context: str
    ) -> ScanResult:
        findings = findings + self.extra_findings(text, context)
        grouped: dict[str, list[str]] = {}
        for finding in findings:
            name = self.bucket_for(finding.category, context)
            grouped.setdefault(name, []).append(finding.description)
        return self.build_result(
            text, tuple(findings), self._freeze_buckets(grouped), context
        )

    def _freeze_buckets(self, grouped: dict[str, list[str]]) -> MappingProxyType:
        frozen = {name: tuple(grouped.get(name, ())) for name in self.bucket_names}
        for name, issues in grouped.items():
            frozen.setdefault(name, tuple(issues))
        return MappingProxyType(frozen)


def _position(text: str, match: re.Match[str]) -> tuple[int, int]:
    """1-based line and column of *match* within *text*."""
    start = match.start()
    line = text.count("\n", 0, start) + 1
    column = start - (text.rfind("\n", 0, start) + 1) + 1
    return line, column
