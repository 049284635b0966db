"""Scanner data models — rules, findings and scan results."""

from __future__ import annotations

import enum
import functools
import re
from collections.abc import Mapping
from dataclasses import dataclass, field


@functools.total_ordering
class Severity(enum.Enum):
    """Severity tier, totally ordered: low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class FindingKind(enum.Enum):
    """Which scanner family produced a finding."""

    VULNERABILITY = "vulnerability"
    SECRET = "secret"
    QUALITY = "quality"


@dataclass(frozen=True)
class PatternRule:
    """A catalog entry: compiled pattern plus reporting metadata."""

    rule_id: str
    regex: re.Pattern[str]
    message: str
    severity: Severity
    category: str
    type: str = ""
    cwe: str = ""
    confidence: float | None = None
    min_matches: int = 1


@dataclass(frozen=True)
class Finding:
    """One reported issue, produced by a single rule over one text buffer."""

    kind: FindingKind
    type: str
    severity: Severity
    description: str
    category: str = ""
    rule_id: str = ""
    count: int = 1
    source_label: str = ""
    line: int | None = None
    column: int | None = None
    excerpt: str = ""

    @property
    def label(self) -> str:
        return f"[{self.severity.name}] {self.description}"


@dataclass(frozen=True)
class ScanResult:
    """Output of one scanner invocation over one text buffer.

    ``severity`` is always the highest tier among ``findings`` (low when
    empty). ``buckets`` groups the rendered issue strings by the domain's
    category buckets (e.g. ``sql_injection`` vs ``encryption``).
    """

    domain: str
    findings: tuple[Finding, ...] = ()
    buckets: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    severity: Severity = Severity.LOW
    context: str = ""

    # Results compare by value but are not hashable: buckets is a read-only mapping
    __hash__ = None  # type: ignore[assignment]

    def bucket(self, name: str) -> tuple[str, ...]:
        return self.buckets.get(name, ())

    @property
    def messages(self) -> list[str]:
        return [f.label for f in self.findings]

    @property
    def is_empty(self) -> bool:
        return not self.findings


@dataclass(frozen=True)
class QualityResult(ScanResult):
    """Quality scan output with the derived maintainability metrics."""

    maintainability_score: int = 100
    complexity_score: int = 1
    technical_debt: int = 0

    __hash__ = None  # type: ignore[assignment]
