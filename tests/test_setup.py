"""Tests for the rule configuration builder."""

import pytest

from mdlint.engine import RuleSetup, Severity
from mdlint.errors import ConfigurationError
from mdlint.rules import CodeBlockStyle, UlIndentRule, UnorderedListStyle


def test_defaults_when_nothing_is_set():
    config = RuleSetup("ul-indent", {"indent": 2}).build()

    assert config.enabled
    assert config.severity is Severity.WARNING
    assert config["indent"] == 2
    assert config.includes == () and config.excludes == ()


def test_last_write_wins():
    setup = RuleSetup("ul-indent", {"indent": 2})
    setup.set("indent", 3).set("indent", 4)
    setup["severity"] = "info"
    setup.disable().enable().disable()

    config = setup.build()
    assert config["indent"] == 4
    assert config.severity is Severity.INFO
    assert not config.enabled


def test_config_is_read_only():
    config = RuleSetup("ul-indent", {"indent": 2}).build()

    with pytest.raises(TypeError):
        config.params["indent"] = 3  # type: ignore[index]


def test_unknown_parameter():
    setup = RuleSetup("ul-indent", {"indent": 2}).set("size", 4)

    with pytest.raises(ConfigurationError, match="unknown parameter 'size'"):
        setup.build()


def test_type_mismatch():
    with pytest.raises(ConfigurationError, match="expects int"):
        RuleSetup("ul-indent", {"indent": 2}).set("indent", "four").build()


def test_bool_is_not_an_int():
    with pytest.raises(ConfigurationError):
        RuleSetup("ul-indent", {"indent": 2}).set("indent", True).build()


def test_list_is_not_an_int():
    with pytest.raises(ConfigurationError, match="expects int, got list"):
        RuleSetup("ul-indent", {"indent": 2}).set("indent", [2]).build()


def test_enum_from_string():
    defaults = {"style": UnorderedListStyle.DASH}

    assert RuleSetup("ul-style", defaults).set("style", "asterisk").build()["style"] is UnorderedListStyle.ASTERISK
    assert RuleSetup("ul-style", defaults).set("style", "Consistent").build()["style"] is UnorderedListStyle.CONSISTENT
    assert (
        RuleSetup("code-block-style", {"style": CodeBlockStyle.FENCED}).set("style", CodeBlockStyle.INDENTED).build()[
            "style"
        ]
        is CodeBlockStyle.INDENTED
    )


def test_enum_rejects_unknown_name():
    with pytest.raises(ConfigurationError, match="must be one of: consistent, asterisk, plus, dash"):
        RuleSetup("ul-style", {"style": UnorderedListStyle.DASH}).set("style", "bullet").build()


def test_invalid_severity_and_enabled():
    setup = RuleSetup("ul-indent", {"indent": 2}).set("severity", "fatal").set("enabled", "yes")

    with pytest.raises(ConfigurationError) as exc_info:
        setup.build()

    message = str(exc_info.value)
    assert "Invalid severity 'fatal'" in message
    assert "'enabled' must be a boolean" in message
    assert message.startswith("Invalid configuration for rule 'ul-indent'")


def test_include_exclude_patterns():
    setup = RuleSetup("ul-indent", {"indent": 2})
    setup.set("include", "docs/*.md").set("exclude", ["docs/generated/*.md", "CHANGELOG.md"])

    config = setup.build()
    assert config.includes == ("docs/*.md",)
    assert config.excludes == ("docs/generated/*.md", "CHANGELOG.md")


def test_bad_pattern_type():
    with pytest.raises(ConfigurationError, match="glob pattern"):
        RuleSetup("ul-indent", {"indent": 2}).set("include", 3)


def test_rule_configuration_closure():
    rule = UlIndentRule(lambda setup: setup.set("indent", 4))

    assert rule.config["indent"] == 4


def test_with_config_layers_on_a_copy():
    rule = UlIndentRule(lambda setup: setup.set("indent", 4))
    strict = rule.with_config(lambda setup: setup.set("severity", Severity.ERROR))

    assert rule.config.severity is Severity.WARNING
    assert strict.config.severity is Severity.ERROR
    assert strict.config["indent"] == 4


def test_invalid_rule_configuration_raises_at_construction():
    with pytest.raises(ConfigurationError):
        UlIndentRule(lambda setup: setup.set("indent", -1.5))
