"""Code-quality rule catalog plus the weights behind the quality metrics."""

from __future__ import annotations

import re

from guardscan.scanner.models import PatternRule, Severity
from guardscan.scanner.rules.loader import build_rule

RULES: list[PatternRule] = [
    build_rule(
        "quality.todo",
        r"\bTODO\b",
        "TODO comment left in the code",
        Severity.LOW,
        "Maintainability",
        type="TODO Comment",
    ),
    build_rule(
        "quality.fixme",
        r"\bFIXME\b",
        "FIXME comment left in the code",
        Severity.MEDIUM,
        "Maintainability",
        type="FIXME Comment",
    ),
    build_rule(
        "quality.console-log",
        r"console\.log",
        "Debug statement (console.log) left in the code",
        Severity.LOW,
        "Debugging",
        type="Debug Statement",
        flags=0,
    ),
    build_rule(
        "quality.magic-numbers",
        r"\b\d{2,}\b",
        "Multiple magic numbers - consider using named constants",
        Severity.LOW,
        "Readability",
        type="Magic Number",
        min_matches=4,
        flags=0,
    ),
]

BUCKETS: dict[str, str] = {}
DEFAULT_BUCKET = "issues"

# rule id -> (maintainability penalty per match, penalty cap, debt per match)
METRIC_WEIGHTS: dict[str, tuple[int, int | None, int]] = {
    "quality.todo": (5, None, 5),
    "quality.fixme": (10, None, 10),
    "quality.console-log": (3, None, 0),
    "quality.magic-numbers": (2, 20, 0),
}

# Control-flow keywords counted towards the complexity score
COMPLEXITY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\bif\s*\("),
    re.compile(r"\bfor\s*\("),
    re.compile(r"\bwhile\s*\("),
    re.compile(r"\bswitch\s*\("),
]

LONG_FILE_LINES = 50
