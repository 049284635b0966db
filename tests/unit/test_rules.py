"""Tests for the built-in rule catalogs and rule filters."""

from __future__ import annotations

from guardscan.scanner.models import Severity
from guardscan.scanner.rules import database, devops, fullstack, quality, secrets, security
from guardscan.scanner.rules.loader import build_rule, drop_matching, keep_matching

CATALOGS = {
    "security": security,
    "secrets": secrets,
    "quality": quality,
    "devops": devops,
    "database": database,
    "fullstack": fullstack,
}


class TestCatalogs:
    def test_rule_ids_unique(self):
        ids = [rule.rule_id for module in CATALOGS.values() for rule in module.RULES]
        assert len(ids) == len(set(ids))

    def test_every_rule_has_message_and_category(self):
        for module in CATALOGS.values():
            for rule in module.RULES:
                assert rule.message
                assert rule.category
                assert rule.type

    def test_secret_rules_carry_confidence(self):
        for rule in secrets.RULES:
            assert rule.confidence is not None
            assert 0.0 <= rule.confidence <= 1.0

    def test_bucket_targets_are_declared(self):
        for module in (devops, database, fullstack):
            assert all(module.BUCKETS.values())
            assert module.DEFAULT_BUCKET in module.BUCKETS.values()

    def test_quality_weights_reference_real_rules(self):
        ids = {rule.rule_id for rule in quality.RULES}
        assert set(quality.METRIC_WEIGHTS) <= ids


class TestRuleFilters:
    def _rule(self, category: str, message: str):
        return build_rule("t.rule", "x", message, Severity.LOW, category)

    def test_keep_by_category_substring(self):
        keep = keep_matching(["Frontend"])
        assert keep(self._rule("Frontend Security", "whatever"))
        assert not keep(self._rule("Backend Security", "whatever"))

    def test_keep_by_message_word(self):
        keep = keep_matching([], ["MongoDB"])
        assert keep(self._rule("Configuration", "MongoDB auth disabled"))
        assert not keep(self._rule("Configuration", "Redis auth disabled"))

    def test_keep_nothing_by_default(self):
        assert not keep_matching()(self._rule("Anything", "anything"))

    def test_drop_is_inverse(self):
        drop = drop_matching(["NoSQL"], ["Redis"])
        assert not drop(self._rule("NoSQL Injection", "eval"))
        assert not drop(self._rule("Configuration", "Redis protected mode"))
        assert drop(self._rule("SQL Injection", "string concatenation"))

    def test_context_filter_keywords_lowercase(self):
        for module in (devops, database, fullstack):
            for keywords, _ in module.CONTEXT_FILTERS:
                assert all(word == word.lower() for word in keywords)
