"""Severity classification and aggregation.

One precedence rule is shared by every caller: single scan results, merged
per-file results and workspace-wide rollups.
"""

from __future__ import annotations

from collections.abc import Iterable

from guardscan.scanner.models import Finding, FindingKind, Severity

VULNERABILITY_LIMIT = 3
SECRET_LIMIT = 2
QUALITY_LIMIT = 5


def highest(findings: Iterable[Finding]) -> Severity:
    """Maximum severity present among *findings*, or LOW if there are none."""
    return max((f.severity for f in findings), default=Severity.LOW)


def classify(
    findings: Iterable[Finding],
    vulnerability_limit: int = VULNERABILITY_LIMIT,
    secret_limit: int = SECRET_LIMIT,
    quality_limit: int = QUALITY_LIMIT,
) -> Severity:
    """Derive one overall tier from a set of findings.

    critical: any critical finding
    high: any high finding, or more than *vulnerability_limit*
        vulnerabilities, or more than *secret_limit* secrets
    medium: any vulnerability or secret, or more than *quality_limit*
        quality issues
    low: anything else, including a handful of quality issues
    """
    findings = list(findings)
    if not findings:
        return Severity.LOW

    severities = {f.severity for f in findings}
    if Severity.CRITICAL in severities:
        return Severity.CRITICAL

    vulnerabilities = sum(1 for f in findings if f.kind == FindingKind.VULNERABILITY)
    secrets = sum(1 for f in findings if f.kind == FindingKind.SECRET)
    quality = sum(1 for f in findings if f.kind == FindingKind.QUALITY)
    if (
        Severity.HIGH in severities
        or vulnerabilities > vulnerability_limit
        or secrets > secret_limit
    ):
        return Severity.HIGH

    if vulnerabilities or secrets or quality > quality_limit:
        return Severity.MEDIUM
    return Severity.LOW


def aggregate(severities: Iterable[Severity]) -> Severity:
    """Roll per-file tiers up into one workspace tier."""
    return max(severities, default=Severity.LOW)


def confidence_tier(confidence: float) -> Severity:
    """Map a secret pattern's confidence (0..1) onto a severity tier."""
    if confidence >= 0.9:
        return Severity.CRITICAL
    if confidence >= 0.8:
        return Severity.HIGH
    if confidence >= 0.6:
        return Severity.MEDIUM
    return Severity.LOW
