"""Tests for severity classification and aggregation."""

from __future__ import annotations

import itertools

from guardscan.scanner.models import Finding, FindingKind, Severity
from guardscan.scanner.severity import (
    aggregate,
    classify,
    confidence_tier,
    highest,
)


def _finding(kind: FindingKind, severity: Severity) -> Finding:
    return Finding(kind=kind, type="t", severity=severity, description="d")


VULN = FindingKind.VULNERABILITY
SECRET = FindingKind.SECRET
QUALITY = FindingKind.QUALITY


class TestSeverityOrdering:
    def test_total_order(self):
        assert Severity.LOW < Severity.MEDIUM < Severity.HIGH < Severity.CRITICAL
        assert max(Severity) is Severity.CRITICAL
        assert sorted([Severity.HIGH, Severity.LOW]) == [Severity.LOW, Severity.HIGH]


class TestHighest:
    def test_empty_is_low(self):
        assert highest([]) is Severity.LOW

    def test_max_tier(self):
        findings = [_finding(VULN, Severity.MEDIUM), _finding(SECRET, Severity.HIGH)]
        assert highest(findings) is Severity.HIGH


class TestClassify:
    def test_empty_is_low(self):
        assert classify([]) is Severity.LOW

    def test_any_critical(self):
        findings = [_finding(QUALITY, Severity.LOW), _finding(SECRET, Severity.CRITICAL)]
        assert classify(findings) is Severity.CRITICAL

    def test_any_high(self):
        assert classify([_finding(VULN, Severity.HIGH)]) is Severity.HIGH

    def test_vulnerability_count_threshold(self):
        three = [_finding(VULN, Severity.MEDIUM)] * 3
        assert classify(three) is Severity.MEDIUM
        assert classify(three + [_finding(VULN, Severity.LOW)]) is Severity.HIGH

    def test_secret_count_threshold(self):
        two = [_finding(SECRET, Severity.LOW)] * 2
        assert classify(two) is Severity.MEDIUM
        assert classify(two * 2) is Severity.HIGH

    def test_single_vulnerability_or_secret_is_medium(self):
        assert classify([_finding(VULN, Severity.LOW)]) is Severity.MEDIUM
        assert classify([_finding(SECRET, Severity.LOW)]) is Severity.MEDIUM

    def test_single_quality_issue_is_low(self):
        assert classify([_finding(QUALITY, Severity.LOW)]) is Severity.LOW
        assert classify([_finding(QUALITY, Severity.MEDIUM)]) is Severity.LOW

    def test_quality_count_threshold(self):
        five = [_finding(QUALITY, Severity.LOW)] * 5
        assert classify(five) is Severity.LOW
        assert classify(five + [_finding(QUALITY, Severity.MEDIUM)]) is Severity.MEDIUM

    def test_high_quality_issue_is_high(self):
        assert classify([_finding(QUALITY, Severity.HIGH)]) is Severity.HIGH

    def test_custom_limits(self):
        findings = [_finding(VULN, Severity.LOW)] * 2
        assert classify(findings, vulnerability_limit=1) is Severity.HIGH
        quality = [_finding(QUALITY, Severity.LOW)] * 2
        assert classify(quality, quality_limit=1) is Severity.MEDIUM

    def test_order_independent(self):
        findings = [
            _finding(VULN, Severity.MEDIUM),
            _finding(SECRET, Severity.LOW),
            _finding(SECRET, Severity.MEDIUM),
            _finding(QUALITY, Severity.LOW),
        ]
        outcomes = {classify(list(p)) for p in itertools.permutations(findings)}
        assert outcomes == {Severity.MEDIUM}

    def test_accepts_generators(self):
        assert classify(_finding(VULN, Severity.HIGH) for _ in range(2)) is Severity.HIGH


class TestAggregate:
    def test_empty(self):
        assert aggregate([]) is Severity.LOW

    def test_max(self):
        assert aggregate([Severity.MEDIUM, Severity.CRITICAL, Severity.LOW]) is Severity.CRITICAL


class TestConfidenceTier:
    def test_tiers(self):
        assert confidence_tier(0.98) is Severity.CRITICAL
        assert confidence_tier(0.9) is Severity.CRITICAL
        assert confidence_tier(0.85) is Severity.HIGH
        assert confidence_tier(0.8) is Severity.HIGH
        assert confidence_tier(0.7) is Severity.MEDIUM
        assert confidence_tier(0.6) is Severity.MEDIUM
        assert confidence_tier(0.3) is Severity.LOW
