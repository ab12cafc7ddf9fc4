"""dupcheck - finds packages bundled at more than one version."""

__version__ = "1.0.0"

from .checker import DuplicatePackageChecker
from .classifier import (
    CallableExclusion,
    CompositeExclusion,
    DuplicateClassifier,
    ExclusionStrategy,
    RuleListExclusion,
)
from .config import CheckerOptions, load_options
from .models import DiagnosticSink, Instance, PackageIdentity, ResolvedModule

__all__ = [
    "DuplicatePackageChecker",
    "CheckerOptions",
    "load_options",
    "DuplicateClassifier",
    "ExclusionStrategy",
    "CallableExclusion",
    "RuleListExclusion",
    "CompositeExclusion",
    "DiagnosticSink",
    "Instance",
    "PackageIdentity",
    "ResolvedModule",
]
