"""Decides which package instances count as reportable duplicates."""

import fnmatch
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional, Union

from .models import DuplicateMap, ExclusionCandidate, Instance, PackageInstanceMap
from .version_parser import VersionParser

logger = logging.getLogger(__name__)


class ExclusionStrategy(ABC):
    """Decides whether a duplicated instance should be left out of the report."""

    @abstractmethod
    def decide(self, candidate: ExclusionCandidate) -> bool:
        """Return True to exclude the candidate."""


class CallableExclusion(ExclusionStrategy):
    """Wraps a plain predicate over ExclusionCandidate."""

    def __init__(self, predicate: Callable[[ExclusionCandidate], bool]):
        self.predicate = predicate

    def decide(self, candidate: ExclusionCandidate) -> bool:
        return bool(self.predicate(candidate))

    def __repr__(self) -> str:
        return f"CallableExclusion({self.predicate!r})"


class RuleListExclusion(ExclusionStrategy):
    """
    Excludes candidates matching any rule in a list.

    Rules are either "name" or "name@version", and both parts accept glob
    patterns, e.g. "lodash", "@babel/*", "react@16.*". The leading '@' of a
    scoped name is not taken as a version separator.
    """

    def __init__(self, rules: Iterable[str]):
        self.rules = [self._split(rule) for rule in rules]

    @staticmethod
    def _split(rule: str):
        rule = rule.strip()
        separator = rule.find('@', 1)
        if separator < 0:
            return rule, None
        return rule[:separator], rule[separator + 1:]

    def decide(self, candidate: ExclusionCandidate) -> bool:
        for name_pattern, version_pattern in self.rules:
            if not fnmatch.fnmatchcase(candidate.name, name_pattern):
                continue
            if version_pattern is None or fnmatch.fnmatchcase(candidate.version, version_pattern):
                return True
        return False

    def __repr__(self) -> str:
        return f"RuleListExclusion({self.rules!r})"


class CompositeExclusion(ExclusionStrategy):
    """Excludes a candidate when any member strategy does."""

    def __init__(self, strategies: Iterable[ExclusionStrategy]):
        self.strategies = list(strategies)

    def decide(self, candidate: ExclusionCandidate) -> bool:
        return any(strategy.decide(candidate) for strategy in self.strategies)


ExcludeOption = Union[ExclusionStrategy, Callable[[ExclusionCandidate], bool], Iterable[str], None]


def as_exclusion_strategy(exclude: ExcludeOption) -> Optional[ExclusionStrategy]:
    """Coerce a callable or a list of rule strings into an ExclusionStrategy."""
    if exclude is None or isinstance(exclude, ExclusionStrategy):
        return exclude
    if callable(exclude):
        return CallableExclusion(exclude)
    if isinstance(exclude, str):
        return RuleListExclusion([exclude])
    return RuleListExclusion(exclude)


class DuplicateClassifier:
    """
    Selects the duplicated instances of each package name.

    In strict mode any package present at two or more versions is a
    duplicate. In relaxed mode only instances sharing a major version with
    another instance are reported.
    """

    def __init__(self, strict: bool = True, exclude: ExcludeOption = None):
        self.strict = strict
        self.exclude = as_exclusion_strategy(exclude)

    def classify(self, packages: PackageInstanceMap) -> DuplicateMap:
        """
        Classify every package in the instance map.

        Returns:
            Mapping of duplicated package names to their reportable instances,
            in no particular name order
        """
        duplicates: DuplicateMap = {}

        for name, instances in packages.items():
            filtered = self.classify_package(name, instances)
            if filtered is not None:
                duplicates[name] = filtered

        logger.info(
            f"Found {len(duplicates)} duplicated packages out of {len(packages)} "
            f"({'strict' if self.strict else 'relaxed'} mode)"
        )
        return duplicates

    def classify_package(self, name: str, instances: List[Instance]) -> Optional[List[Instance]]:
        """Return the reportable instances of one package, or None if it is not duplicated."""
        if len(instances) <= 1:
            return None

        filtered = instances if self.strict else _same_major_groups(instances)
        if len(filtered) <= 1:
            return None

        if self.exclude is not None:
            kept = []
            for instance in filtered:
                if self.exclude.decide(ExclusionCandidate.from_instance(name, instance)):
                    logger.debug(f"Excluded {name}@{instance.version}")
                else:
                    kept.append(instance)
            filtered = kept

            if len(filtered) <= 1:
                return None

        return list(filtered)


def _same_major_groups(instances: List[Instance]) -> List[Instance]:
    """Keep instances whose major version group has more than one member."""
    groups: Dict[object, List[Instance]] = defaultdict(list)
    for instance in instances:
        groups[VersionParser.group_key(instance.version)].append(instance)

    filtered: List[Instance] = []
    for group in groups.values():
        if len(group) > 1:
            filtered.extend(group)
    return filtered


def classify(
    packages: PackageInstanceMap,
    strict: bool = True,
    exclude: ExcludeOption = None
) -> DuplicateMap:
    """Convenience wrapper around DuplicateClassifier."""
    return DuplicateClassifier(strict, exclude).classify(packages)
