"""Tests for custom rule loading from YAML."""

from __future__ import annotations

import re

import pytest

from guardscan.scanner.models import Severity
from guardscan.scanner.rules.loader import (
    build_rule,
    load_rule_files,
    load_rules,
    load_rules_from_string,
    merge_rule_groups,
)

RULES_YAML = """\
rules:
  - domain: security
    id: no-pickle
    pattern: 'pickle\\.loads?\\('
    message: Untrusted pickle data
    severity: high
    category: Deserialization
  - domain: secrets
    id: internal-token
    pattern: 'itk_[a-z0-9]{16}'
    message: Internal token
    confidence: 0.85
  - domain: quality
    pattern: 'print\\('
    message: Stray print
"""


class TestBuildRule:
    def test_string_severity(self):
        rule = build_rule("x.y", "abc", "msg", "High", "Cat")
        assert rule.severity is Severity.HIGH
        assert rule.type == "Cat"

    def test_ignore_case_by_default(self):
        rule = build_rule("x.y", "abc", "msg", Severity.LOW, "Cat")
        assert rule.regex.search("ABC")

    def test_case_sensitive_flag(self):
        rule = build_rule("x.y", "abc", "msg", Severity.LOW, "Cat", flags=0)
        assert rule.regex.search("ABC") is None

    def test_invalid_severity(self):
        with pytest.raises(ValueError):
            build_rule("x.y", "abc", "msg", "urgent", "Cat")

    def test_invalid_pattern(self):
        with pytest.raises(re.error):
            build_rule("x.y", "(", "msg", "low", "Cat")


class TestLoadRulesFromString:
    def test_groups_by_domain(self):
        grouped = load_rules_from_string(RULES_YAML)
        assert set(grouped) == {"security", "secrets", "quality"}

        pickle_rule = grouped["security"][0]
        assert pickle_rule.rule_id == "no-pickle"
        assert pickle_rule.severity is Severity.HIGH
        assert pickle_rule.category == "Deserialization"
        assert pickle_rule.regex.search("pickle.loads(data)")

    def test_severity_derived_from_confidence(self):
        rule = load_rules_from_string(RULES_YAML)["secrets"][0]
        assert rule.confidence == 0.85
        assert rule.severity is Severity.HIGH

    def test_defaults(self):
        rule = load_rules_from_string(RULES_YAML)["quality"][0]
        assert rule.rule_id == "custom.2"
        assert rule.severity is Severity.MEDIUM
        assert rule.category == "Custom"

    def test_empty_document(self):
        assert load_rules_from_string("") == {}

    def test_not_a_mapping(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            load_rules_from_string("- just\n- a list\n")

    def test_unknown_domain(self):
        text = "rules:\n  - domain: kernel\n    pattern: x\n    message: m\n"
        with pytest.raises(ValueError, match="Unknown domain 'kernel'"):
            load_rules_from_string(text)

    def test_missing_pattern(self):
        text = "rules:\n  - id: broken\n    message: m\n"
        with pytest.raises(ValueError, match="Missing 'pattern'"):
            load_rules_from_string(text)

    def test_bad_regex(self):
        text = "rules:\n  - id: broken\n    pattern: '('\n    message: m\n"
        with pytest.raises(ValueError, match="Invalid pattern for rule 'broken'"):
            load_rules_from_string(text)

    def test_bad_severity(self):
        text = "rules:\n  - id: broken\n    pattern: x\n    message: m\n    severity: urgent\n"
        with pytest.raises(ValueError, match="Invalid value for rule 'broken'"):
            load_rules_from_string(text)

    def test_case_sensitive_opt_in(self):
        text = "rules:\n  - pattern: Token\n    message: m\n    ignore_case: false\n"
        rule = load_rules_from_string(text)["security"][0]
        assert rule.regex.search("token") is None


class TestLoadFiles:
    def test_load_rules(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML)
        assert len(load_rules(path)["security"]) == 1

    def test_load_rule_files_merges_in_order(self, tmp_path):
        first = tmp_path / "a.yaml"
        first.write_text("rules:\n  - id: one\n    pattern: x\n    message: m\n")
        second = tmp_path / "b.yaml"
        second.write_text("rules:\n  - id: two\n    pattern: y\n    message: m\n")

        merged = load_rule_files([first, second])
        assert [r.rule_id for r in merged["security"]] == ["one", "two"]

    def test_load_rule_files_empty(self):
        assert load_rule_files([]) == {}

    def test_merge_rule_groups(self):
        a = load_rules_from_string("rules:\n  - domain: quality\n    pattern: x\n    message: m\n")
        b = load_rules_from_string("rules:\n  - domain: devops\n    pattern: y\n    message: m\n")
        merged = merge_rule_groups([a, b])
        assert set(merged) == {"quality", "devops"}
