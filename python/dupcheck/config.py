"""Checker options and their loading from mappings and JSON files."""

import json
import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .classifier import CompositeExclusion, ExcludeOption, ExclusionStrategy, as_exclusion_strategy
from .issuers import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

# camelCase spellings used by webpack plugin configs
CAMEL_CASE_KEYS = {
    'showHelp': 'show_help',
    'emitError': 'emit_error',
    'maxIssuerDepth': 'max_issuer_depth',
}


@dataclass
class CheckerOptions:
    """Options controlling classification and reporting."""

    verbose: bool = False  # Append the immediate issuer path to each instance line
    show_help: bool = True  # Append the help footer to the last diagnostic
    emit_error: bool = False  # Report into errors instead of warnings
    exclude: Optional[ExclusionStrategy] = None
    strict: bool = True  # False groups by major version (relaxed mode)
    max_issuer_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        """Coerce plain predicates and rule lists into an ExclusionStrategy."""
        self.exclude = as_exclusion_strategy(self.exclude)

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None, **overrides) -> 'CheckerOptions':
        """
        Build options from a mapping using snake_case or camelCase keys.

        Unknown keys are logged and ignored. Keyword overrides win over
        values from the mapping.
        """
        known = {f.name for f in fields(cls)}
        values = {}

        for key, value in dict(options or {}, **overrides).items():
            attr = CAMEL_CASE_KEYS.get(key, key)
            if attr not in known:
                logger.warning(f"Ignoring unknown option: {key}")
                continue
            values[attr] = value

        for flag in ('verbose', 'show_help', 'emit_error', 'strict'):
            if flag in values and not isinstance(values[flag], bool):
                raise ValueError(f"Option {flag} must be a boolean, got {values[flag]!r}")

        return cls(**values)

    def with_exclusion(self, exclude: ExcludeOption) -> 'CheckerOptions':
        """Return a copy with another exclusion strategy added."""
        addition = as_exclusion_strategy(exclude)
        if addition is None:
            return self
        combined = addition if self.exclude is None else CompositeExclusion([self.exclude, addition])
        return CheckerOptions(
            verbose=self.verbose,
            show_help=self.show_help,
            emit_error=self.emit_error,
            exclude=combined,
            strict=self.strict,
            max_issuer_depth=self.max_issuer_depth,
        )


def load_options(config_path: str, **overrides) -> CheckerOptions:
    """Load CheckerOptions from a JSON file."""
    with open(config_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    logger.info(f"Loaded options from {config_path}")
    return CheckerOptions.from_mapping(data, **overrides)
