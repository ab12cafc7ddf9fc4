"""Tests for checker options."""

import json

import pytest

from dupcheck.classifier import CallableExclusion, CompositeExclusion, RuleListExclusion
from dupcheck.config import CheckerOptions, load_options
from dupcheck.models import ExclusionCandidate


def candidate(name, version):
    return ExclusionCandidate(name=name, version=version, path=".", issuer=None)


class TestCheckerOptions:
    """Tests for CheckerOptions."""

    def test_defaults(self):
        """Test the default option values."""
        options = CheckerOptions()

        assert options.verbose is False
        assert options.show_help is True
        assert options.emit_error is False
        assert options.exclude is None
        assert options.strict is True

    def test_callable_exclude_is_wrapped(self):
        """Test that a callable exclude becomes a CallableExclusion."""
        options = CheckerOptions(exclude=lambda c: c.name == "a")

        assert isinstance(options.exclude, CallableExclusion)
        assert options.exclude.decide(candidate("a", "1.0.0"))

    def test_from_mapping_camel_case(self):
        """Test camelCase option keys."""
        options = CheckerOptions.from_mapping({
            "verbose": True,
            "showHelp": False,
            "emitError": True,
            "strict": False,
            "exclude": ["react@16.*"],
        })

        assert options.verbose and options.emit_error
        assert not options.show_help and not options.strict
        assert isinstance(options.exclude, RuleListExclusion)
        assert options.exclude.decide(candidate("react", "16.0.0"))

    def test_from_mapping_snake_case_and_overrides(self):
        """Test snake_case keys and keyword overrides."""
        options = CheckerOptions.from_mapping({"show_help": False}, show_help=True, strict=False)

        assert options.show_help is True
        assert options.strict is False

    def test_unknown_keys_ignored(self, caplog):
        """Test that unknown keys are logged and ignored."""
        options = CheckerOptions.from_mapping({"colors": True})

        assert options == CheckerOptions()
        assert "Ignoring unknown option: colors" in caplog.text

    def test_non_boolean_flag_rejected(self):
        """Test that flags must be booleans."""
        with pytest.raises(ValueError):
            CheckerOptions.from_mapping({"strict": "no"})

    def test_with_exclusion_combines(self):
        """Test adding an exclusion to an existing one."""
        options = CheckerOptions(exclude=["a"]).with_exclusion(["b@2.*"])

        assert isinstance(options.exclude, CompositeExclusion)
        assert options.exclude.decide(candidate("a", "1.0.0"))
        assert options.exclude.decide(candidate("b", "2.1.0"))
        assert not options.exclude.decide(candidate("b", "1.0.0"))

    def test_with_exclusion_none(self):
        """Test adding no exclusion or a first exclusion."""
        options = CheckerOptions()

        assert options.with_exclusion(None) is options
        assert isinstance(options.with_exclusion(["a"]).exclude, RuleListExclusion)


class TestLoadOptions:
    """Tests for reading options from JSON files."""

    def test_load(self, tmp_path):
        """Test loading options from JSON with overrides."""
        path = tmp_path / "dupcheck.json"
        path.write_text(json.dumps({"strict": False, "exclude": ["tslib"]}))

        options = load_options(str(path), verbose=True)

        assert options.strict is False
        assert options.verbose is True
        assert options.exclude.decide(candidate("tslib", "2.0.0"))

    def test_load_non_object(self, tmp_path):
        """Test that a config file must hold an object."""
        path = tmp_path / "dupcheck.json"
        path.write_text("[]")

        with pytest.raises(ValueError):
            load_options(str(path))

    def test_load_missing(self, tmp_path):
        """Test that a missing config file raises OSError."""
        with pytest.raises(OSError):
            load_options(str(tmp_path / "missing.json"))
