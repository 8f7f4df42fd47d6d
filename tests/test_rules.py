"""
Tests for the Rule Registry
"""

import pytest

from taskguard.core.errors import ConfigurationError
from taskguard.core.finding import Severity
from taskguard.core.rules import (
    DEFAULT_REGISTRY,
    SECURITY_RULES,
    PatternSpec,
    Rule,
    RuleRegistry,
)


def _rule(rule_id: str, severity: Severity, *patterns: str) -> Rule:
    return Rule(
        id=rule_id,
        name=rule_id.title(),
        severity=severity,
        patterns=tuple(PatternSpec(p) for p in patterns),
        description=f"{rule_id} description",
    )


class TestBuiltinCatalog:
    """Tests for the compiled-in rule table."""

    def test_rule_ids_are_unique(self):
        """Test no two rules share an id."""
        ids = [rule.id for rule in SECURITY_RULES]
        assert len(ids) == len(set(ids))

    def test_every_rule_has_patterns(self):
        """Test every rule declares at least one pattern."""
        assert all(rule.patterns for rule in SECURITY_RULES)

    def test_catalog_validates(self):
        """Test every built-in pattern compiles."""
        DEFAULT_REGISTRY.validate()

    def test_tier_order(self):
        """Test iteration goes critical, high, medium, low."""
        ranks = [rule.severity.rank for rule in DEFAULT_REGISTRY]
        assert ranks == sorted(ranks)
        assert [sev for sev, _ in DEFAULT_REGISTRY.tiers()] == Severity.ordered()

    def test_declaration_order_within_tier(self):
        """Test rules keep their declaration order inside a tier."""
        critical = [rule.id for rule in DEFAULT_REGISTRY.tier(Severity.CRITICAL)]
        assert critical == [
            "PROMPT_INJECTION_001",
            "PROMPT_INJECTION_002",
            "MALICIOUS_CMD_001",
            "DATA_EXFIL_001",
            "SHELL_INJECT_001",
        ]
        low = [rule.id for rule in DEFAULT_REGISTRY.tier(Severity.LOW)]
        assert low == ["OVERRIDE_001", "SUDO_001"]

    def test_credential_rule_has_skip_patterns(self):
        """Test only the credential rule carries skip patterns."""
        with_skips = [rule.id for rule in DEFAULT_REGISTRY if rule.skip_patterns]
        assert with_skips == ["CREDENTIAL_001"]

    def test_get(self):
        """Test lookup by id."""
        rule = DEFAULT_REGISTRY.get("SHELL_INJECT_001")
        assert rule is not None
        assert rule.severity == Severity.CRITICAL
        assert DEFAULT_REGISTRY.get("NOPE_001") is None

    def test_size(self):
        """Test the catalog holds all twelve rules."""
        assert len(DEFAULT_REGISTRY) == 12


class TestRegistryOrdering:
    """Tests for grouping caller-supplied rules."""

    def test_rules_grouped_by_severity(self):
        """Test rules declared out of tier order are grouped stably."""
        registry = RuleRegistry((
            _rule("LOW_A", Severity.LOW, "a"),
            _rule("CRIT_A", Severity.CRITICAL, "b"),
            _rule("LOW_B", Severity.LOW, "c"),
            _rule("HIGH_A", Severity.HIGH, "d"),
            _rule("CRIT_B", Severity.CRITICAL, "e"),
        ))
        assert [r.id for r in registry] == ["CRIT_A", "CRIT_B", "HIGH_A", "LOW_A", "LOW_B"]

    def test_empty_tiers_reported(self):
        """Test tiers() includes tiers without rules."""
        registry = RuleRegistry((_rule("ONLY", Severity.MEDIUM, "x"),))
        tiers = dict(registry.tiers())
        assert tiers[Severity.CRITICAL] == []
        assert [r.id for r in tiers[Severity.MEDIUM]] == ["ONLY"]


class TestValidation:
    """Tests for catalog validation."""

    def test_invalid_pattern(self):
        """Test a pattern that does not compile raises ConfigurationError."""
        registry = RuleRegistry((_rule("BROKEN_001", Severity.HIGH, "(unclosed"),))
        with pytest.raises(ConfigurationError) as excinfo:
            registry.validate()
        assert excinfo.value.rule_id == "BROKEN_001"
        assert excinfo.value.pattern == "(unclosed"

    def test_invalid_skip_pattern(self):
        """Test a broken skip pattern is also a configuration error."""
        rule = Rule(
            id="SKIP_001",
            name="Skip",
            severity=Severity.LOW,
            patterns=(PatternSpec("token"),),
            description="d",
            skip_patterns=(PatternSpec("[oops"),),
        )
        with pytest.raises(ConfigurationError):
            RuleRegistry((rule,)).validate()

    def test_duplicate_ids(self):
        """Test duplicate rule ids are rejected."""
        registry = RuleRegistry((
            _rule("DUP_001", Severity.HIGH, "a"),
            _rule("DUP_001", Severity.LOW, "b"),
        ))
        with pytest.raises(ConfigurationError, match="Duplicate"):
            registry.validate()

    def test_rule_without_patterns(self):
        """Test a rule with an empty pattern list is rejected."""
        registry = RuleRegistry((_rule("EMPTY_001", Severity.LOW),))
        with pytest.raises(ConfigurationError):
            registry.validate()


class TestPatternSpec:
    """Tests for PatternSpec."""

    def test_case_insensitive(self):
        """Test patterns ignore case."""
        assert PatternSpec("jailbreak").compile().search("JailBreak")

    def test_compiled_pattern_is_shared(self):
        """Test compiling twice returns the cached pattern object."""
        spec = PatternSpec(r"\bsudo\s+")
        assert spec.compile() is PatternSpec(r"\bsudo\s+").compile()
