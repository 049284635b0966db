"""Domain scanners built on PatternScanner, plus a factory keyed by domain name."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import MappingProxyType

from guardscan.scanner.cache import DEFAULT_CACHE_SIZE
from guardscan.scanner.engine import PatternScanner, occurrences
from guardscan.scanner.models import (
    Finding,
    FindingKind,
    PatternRule,
    QualityResult,
    ScanResult,
    Severity,
)
from guardscan.scanner.rules import database, devops, fullstack, quality, secrets, security
from guardscan.scanner.severity import highest

logger = logging.getLogger(__name__)


def mask_secret(value: str) -> str:
    """Hide the interior of a detected secret.

    Values of eight characters or fewer are fully masked; longer ones keep
    up to four characters (a fifth of the length) at each end.
    """
    if len(value) <= 8:
        return "*" * len(value)
    visible = min(4, int(len(value) * 0.2))
    return value[:visible] + "*" * (len(value) - visible * 2) + value[-visible:]


class SecurityScanner(PatternScanner):
    domain = "security"
    kind = FindingKind.VULNERABILITY

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        extra_rules: Iterable[PatternRule] = (),
    ) -> None:
        super().__init__(
            [*security.RULES, *extra_rules],
            buckets=security.BUCKETS,
            default_bucket=security.DEFAULT_BUCKET,
            cache_size=cache_size,
        )


class SecretScanner(PatternScanner):
    """Credential and sensitive-data detector; matched values are masked."""

    domain = "secrets"
    kind = FindingKind.SECRET

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        extra_rules: Iterable[PatternRule] = (),
    ) -> None:
        super().__init__(
            [*secrets.RULES, *extra_rules],
            buckets=secrets.BUCKETS,
            default_bucket=secrets.DEFAULT_BUCKET,
            cache_size=cache_size,
        )

    def describe(self, rule: PatternRule, match: str, count: int) -> str:
        text = f"{rule.message}: {mask_secret(match)}"
        if rule.confidence is not None:
            text += f" (confidence: {round(rule.confidence * 100)}%)"
        return f"{text} {occurrences(count)}"

    def excerpt(self, match: str) -> str:
        return mask_secret(match)


class QualityScanner(PatternScanner):
    """Code-quality checks plus maintainability, complexity and debt scores."""

    domain = "quality"
    kind = FindingKind.QUALITY

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        extra_rules: Iterable[PatternRule] = (),
    ) -> None:
        super().__init__(
            [*quality.RULES, *extra_rules],
            buckets=quality.BUCKETS,
            default_bucket=quality.DEFAULT_BUCKET,
            cache_size=cache_size,
        )

    def extra_findings(self, text: str, context: str) -> list[Finding]:
        lines = _line_count(text)
        if lines <= quality.LONG_FILE_LINES:
            return []
        return [
            Finding(
                kind=self.kind,
                type="Long File",
                severity=Severity.MEDIUM,
                description=(
                    f"Function appears to be too long ({lines} lines, "
                    f"recommended: <{quality.LONG_FILE_LINES})"
                ),
                category="Maintainability",
                rule_id="quality.long-file",
                count=1,
            )
        ]

    def build_result(
        self,
        text: str,
        findings: tuple[Finding, ...],
        buckets: MappingProxyType,
        context: str,
    ) -> QualityResult:
        maintainability, complexity, debt = quality_metrics(text, findings)
        return QualityResult(
            domain=self.domain,
            findings=findings,
            buckets=buckets,
            severity=highest(findings),
            context=context,
            maintainability_score=maintainability,
            complexity_score=complexity,
            technical_debt=debt,
        )

    def empty_result(self, context: str = "") -> QualityResult:
        return QualityResult(
            domain=self.domain,
            buckets=self._freeze_buckets({}),
            context=context,
        )


def quality_metrics(text: str, findings: Iterable[Finding]) -> tuple[int, int, int]:
    """Return (maintainability 0..100, complexity >= 1, technical debt >= 0)."""
    complexity = 1 + sum(len(p.findall(text)) for p in quality.COMPLEXITY_PATTERNS)
    maintainability = 100
    debt = 0

    for finding in findings:
        weights = quality.METRIC_WEIGHTS.get(finding.rule_id)
        if weights is None:
            continue
        penalty, cap, debt_per_match = weights
        cost = penalty * finding.count
        maintainability -= cost if cap is None else min(cap, cost)
        debt += debt_per_match * finding.count

    lines = _line_count(text)
    if lines > quality.LONG_FILE_LINES:
        steps = (lines - quality.LONG_FILE_LINES) // 10
        maintainability -= min(30, steps * 5 + 15)
        debt += min(40, steps * 5 + 20)

    return max(0, min(100, maintainability)), max(1, complexity), max(0, debt)


def _line_count(text: str) -> int:
    return text.count("\n") + 1


class DevOpsScanner(PatternScanner):
    """Docker, Kubernetes, Terraform and CI pipeline checks; context is the file type."""

    domain = "devops"
    context_sensitive = True

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        extra_rules: Iterable[PatternRule] = (),
    ) -> None:
        super().__init__(
            [*devops.RULES, *extra_rules],
            buckets=devops.BUCKETS,
            default_bucket=devops.DEFAULT_BUCKET,
            context_filters=devops.CONTEXT_FILTERS,
            cache_size=cache_size,
        )
        self.bucket_names += ("terraform",)

    def bucket_for(self, rule_category: str, context: str) -> str:
        if rule_category in devops.TERRAFORM_CATEGORIES and any(
            word in context for word in devops.TERRAFORM_CONTEXTS
        ):
            return "terraform"
        return super().bucket_for(rule_category, context)

    def analyze_dockerfile(self, text: str) -> ScanResult:
        return self.scan(text, "dockerfile")

    def analyze_kubernetes_manifest(self, text: str) -> ScanResult:
        return self.scan(text, "kubernetes")

    def analyze_terraform(self, text: str) -> ScanResult:
        return self.scan(text, "terraform")

    def analyze_cicd(self, text: str) -> ScanResult:
        return self.scan(text, "cicd")


class DatabaseScanner(PatternScanner):
    """SQL/NoSQL injection and server configuration checks; context is the engine."""

    domain = "database"
    context_sensitive = True

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        extra_rules: Iterable[PatternRule] = (),
    ) -> None:
        super().__init__(
            [*database.RULES, *extra_rules],
            buckets=database.BUCKETS,
            default_bucket=database.DEFAULT_BUCKET,
            context_filters=database.CONTEXT_FILTERS,
            cache_size=cache_size,
        )

    def analyze_mysql(self, text: str) -> ScanResult:
        return self.scan(text, "mysql")

    def analyze_postgresql(self, text: str) -> ScanResult:
        return self.scan(text, "postgresql")

    def analyze_mongodb(self, text: str) -> ScanResult:
        return self.scan(text, "mongodb")

    def analyze_redis(self, text: str) -> ScanResult:
        return self.scan(text, "redis")

    def analyze_sqlserver(self, text: str) -> ScanResult:
        return self.scan(text, "sqlserver")


class FullStackScanner(PatternScanner):
    """Web application checks across browser, server and API code; context is the framework."""

    domain = "fullstack"
    context_sensitive = True

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        extra_rules: Iterable[PatternRule] = (),
    ) -> None:
        super().__init__(
            [*fullstack.RULES, *extra_rules],
            buckets=fullstack.BUCKETS,
            default_bucket=fullstack.DEFAULT_BUCKET,
            context_filters=fullstack.CONTEXT_FILTERS,
            cache_size=cache_size,
        )

    def analyze_react(self, text: str) -> ScanResult:
        return self.scan(text, "react")

    def analyze_vue(self, text: str) -> ScanResult:
        return self.scan(text, "vue")

    def analyze_angular(self, text: str) -> ScanResult:
        return self.scan(text, "angular")

    def analyze_express(self, text: str) -> ScanResult:
        return self.scan(text, "express")

    def analyze_graphql(self, text: str) -> ScanResult:
        return self.scan(text, "graphql")


SCANNERS: dict[str, type[PatternScanner]] = {
    "security": SecurityScanner,
    "secrets": SecretScanner,
    "quality": QualityScanner,
    "devops": DevOpsScanner,
    "database": DatabaseScanner,
    "fullstack": FullStackScanner,
}


def create_scanner(
    domain: str,
    cache_size: int | None = None,
    extra_rules: Iterable[PatternRule] = (),
) -> PatternScanner:
    """Instantiate the scanner for *domain* (one of :data:`SCANNERS`)."""
    try:
        scanner_cls = SCANNERS[domain.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown scanner domain '{domain}' "
            f"(expected one of: {', '.join(SCANNERS)})"
        ) from None
    scanner = scanner_cls(
        cache_size=cache_size or DEFAULT_CACHE_SIZE,
        extra_rules=extra_rules,
    )
    logger.debug("Created %s scanner with %d rules", domain, len(scanner.rules))
    return scanner
