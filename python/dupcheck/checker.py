"""Once-per-build entry point tying aggregation, classification and reporting together."""

import logging
from dataclasses import fields
from typing import Callable, Iterable, List, Optional

from .aggregator import ModuleAggregator
from .classifier import DuplicateClassifier
from .config import CheckerOptions
from .formatters import ReportFormatter
from .locator import PackageLocator
from .models import DiagnosticSink, DuplicateMap, ResolvedModule

logger = logging.getLogger(__name__)


class DuplicatePackageChecker:
    """
    Reports packages bundled at more than one version.

    A checker holds only its options. Everything derived from the modules is
    rebuilt on each call to run() and dropped afterwards.
    """

    def __init__(self, options: Optional[CheckerOptions] = None, **kwargs):
        """
        Args:
            options: Checker options, defaults are used when omitted
            **kwargs: Option values, snake_case or camelCase, overriding options
        """
        if options is None:
            options = CheckerOptions.from_mapping(kwargs)
        elif kwargs:
            current = {f.name: getattr(options, f.name) for f in fields(options)}
            options = CheckerOptions.from_mapping(current, **kwargs)
        self.options = options

    def find_duplicates(self, modules: Iterable[ResolvedModule], context: str) -> DuplicateMap:
        """Aggregate the modules and classify the result."""
        aggregator = ModuleAggregator(
            context,
            locator=PackageLocator(),
            max_issuer_depth=self.options.max_issuer_depth
        )
        packages = aggregator.aggregate(modules)

        classifier = DuplicateClassifier(strict=self.options.strict, exclude=self.options.exclude)
        return classifier.classify(packages)

    def check(self, modules: Iterable[ResolvedModule], context: str) -> List[str]:
        """Return the formatted diagnostics for one build pass."""
        duplicates = self.find_duplicates(modules, context)
        return ReportFormatter.format_diagnostics(
            duplicates,
            verbose=self.options.verbose,
            show_help=self.options.show_help
        )

    def run(
        self,
        modules: Iterable[ResolvedModule],
        context: str,
        sink: DiagnosticSink,
        callback: Optional[Callable[[], None]] = None
    ) -> List[str]:
        """
        Run one pass and append its diagnostics to the sink.

        The callback is invoked exactly once, after the diagnostics were
        appended, also when nothing was found or when a caller-supplied
        exclusion strategy raised.

        Returns:
            The diagnostics appended to the sink
        """
        try:
            diagnostics = self.check(modules, context)
            target = sink.target(self.options.emit_error)
            target.extend(diagnostics)
            if diagnostics:
                kind = 'errors' if self.options.emit_error else 'warnings'
                logger.info(f"Reported {len(diagnostics)} duplicated packages as {kind}")
            else:
                logger.info("No duplicated packages found")
            return diagnostics
        finally:
            if callback is not None:
                callback()
