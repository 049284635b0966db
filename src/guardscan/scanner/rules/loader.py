"""Build PatternRule records and load custom rule catalogs from YAML."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Iterable

import yaml

from guardscan.scanner.models import PatternRule, Severity
from guardscan.scanner.severity import confidence_tier

logger = logging.getLogger(__name__)

DOMAINS = ("security", "secrets", "quality", "devops", "database", "fullstack")


def build_rule(
    rule_id: str,
    pattern: str,
    message: str,
    severity: Severity | str,
    category: str,
    *,
    type: str = "",
    cwe: str = "",
    confidence: float | None = None,
    min_matches: int = 1,
    flags: int = re.IGNORECASE,
) -> PatternRule:
    """Compile *pattern* and wrap it with its reporting metadata."""
    if isinstance(severity, str):
        severity = Severity(severity.lower())
    return PatternRule(
        rule_id=rule_id,
        regex=re.compile(pattern, flags),
        message=message,
        severity=severity,
        category=category,
        type=type or category,
        cwe=cwe,
        confidence=confidence,
        min_matches=min_matches,
    )


def load_rules(path: str | Path) -> dict[str, list[PatternRule]]:
    """Load custom rules from a YAML file, grouped by domain."""
    text = Path(path).read_text(encoding="utf-8")
    return load_rules_from_string(text, source=str(path))


def load_rules_from_string(
    text: str, source: str = "<string>"
) -> dict[str, list[PatternRule]]:
    """Parse a YAML rule document.

    Expected shape::

        rules:
          - domain: security
            id: no-pickle
            pattern: 'pickle\\.loads?\\('
            message: Untrusted pickle data
            severity: high
            category: Deserialization
    """
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Rule file {source} must be a mapping")

    grouped: dict[str, list[PatternRule]] = {}
    for index, entry in enumerate(data.get("rules", []) or []):
        if not isinstance(entry, dict):
            continue
        domain, rule = _parse_rule(entry, index, source)
        grouped.setdefault(domain, []).append(rule)

    logger.debug(
        "Loaded %d custom rule(s) from %s",
        sum(len(v) for v in grouped.values()),
        source,
    )
    return grouped


def load_rule_files(paths: Iterable[str | Path]) -> dict[str, list[PatternRule]]:
    """Load and merge several custom rule files, in order."""
    return merge_rule_groups([load_rules(path) for path in paths])


def merge_rule_groups(
    groups: list[dict[str, list[PatternRule]]],
) -> dict[str, list[PatternRule]]:
    merged: dict[str, list[PatternRule]] = {}
    for group in groups:
        for domain, rules in group.items():
            merged.setdefault(domain, []).extend(rules)
    return merged


RuleFilter = Callable[[PatternRule], bool]


def keep_matching(
    categories: Iterable[str] = (), words: Iterable[str] = ()
) -> RuleFilter:
    """Keep rules whose category contains one of *categories* or whose
    message mentions one of *words*."""
    categories, words = tuple(categories), tuple(words)

    def predicate(rule: PatternRule) -> bool:
        return any(c in rule.category for c in categories) or any(
            w in rule.message for w in words
        )

    return predicate


def drop_matching(
    categories: Iterable[str] = (), words: Iterable[str] = ()
) -> RuleFilter:
    """Inverse of :func:`keep_matching`."""
    keep = keep_matching(categories, words)
    return lambda rule: not keep(rule)


def _parse_rule(entry: dict, index: int, source: str) -> tuple[str, PatternRule]:
    rule_id = str(entry.get("id") or f"custom.{index}")
    where = f"rule '{rule_id}' in {source}"

    domain = str(entry.get("domain", "security")).lower()
    if domain not in DOMAINS:
        raise ValueError(f"Unknown domain '{domain}' for {where}")

    for key in ("pattern", "message"):
        if not entry.get(key):
            raise ValueError(f"Missing '{key}' for {where}")

    confidence = entry.get("confidence")
    severity = entry.get("severity")
    if severity is None:
        if confidence is None:
            severity = "medium"
        else:
            severity = confidence_tier(float(confidence))

    try:
        rule = build_rule(
            rule_id,
            str(entry["pattern"]),
            str(entry["message"]),
            severity,
            str(entry.get("category", "Custom")),
            type=str(entry.get("type", "")),
            cwe=str(entry.get("cwe", "")),
            confidence=float(confidence) if confidence is not None else None,
            min_matches=int(entry.get("min_matches", 1)),
            flags=re.IGNORECASE if entry.get("ignore_case", True) else 0,
        )
    except re.error as exc:
        raise ValueError(f"Invalid pattern for {where}: {exc}") from exc
    except ValueError as exc:
        raise ValueError(f"Invalid value for {where}: {exc}") from exc

    return domain, rule
