"""Aggregates resolved modules into per-package instance lists."""

import logging
from typing import Iterable, List, Optional

from .issuers import DEFAULT_MAX_DEPTH, render_issuer_path, trace_issuers
from .locator import PackageLocator
from .models import Instance, PackageInstanceMap, ResolvedModule
from .paths import PathNormalizer

logger = logging.getLogger(__name__)


class ModuleAggregator:
    """
    Builds a PackageInstanceMap from one pass over the resolved modules.

    For every module the owning package is located, and the module either
    creates a new Instance for (name, version) or adds its rendered issuer
    path to the Instance first seen for that version.
    """

    def __init__(
        self,
        context: str,
        locator: Optional[PackageLocator] = None,
        max_issuer_depth: int = DEFAULT_MAX_DEPTH
    ):
        """
        Args:
            context: Project root that reported paths are made relative to
            locator: Package locator, a fresh one is created when omitted
            max_issuer_depth: Limit on issuer chain traversal
        """
        self.normalize = PathNormalizer(context)
        self.locator = locator or PackageLocator()
        self.max_issuer_depth = max_issuer_depth

    def aggregate(self, modules: Iterable[ResolvedModule]) -> PackageInstanceMap:
        """Consume the modules in host order and return the instance map."""
        packages: PackageInstanceMap = {}
        seen = 0
        skipped = 0

        for module in modules:
            seen += 1
            if not self._add_module(packages, module):
                skipped += 1

        logger.info(
            f"Aggregated {seen - skipped} of {seen} modules into {len(packages)} packages"
        )
        return packages

    def _add_module(self, packages: PackageInstanceMap, module: ResolvedModule) -> bool:
        if not module.resource:
            return False

        identity = self.locator.locate(module.resource)
        if identity is None:
            logger.debug(f"Skipping {module!r}: no owning package")
            return False

        has_issuer = module.issuer is not None and bool(module.issuer.resource)

        instances = packages.setdefault(identity.name, [])
        instance = _find_instance(instances, identity.version)
        if instance is None:
            instance = Instance(
                version=identity.version,
                path=self.normalize(identity.root_path),
                issuer=self.normalize(module.issuer.resource) if has_issuer else None,
            )
            instances.append(instance)
            logger.debug(f"New instance {identity.spec} at {instance.path}")

        if has_issuer:
            chain = trace_issuers(
                module, self.locator, self.max_issuer_depth, names=[identity.spec]
            )
            instance.add_issuer_path(render_issuer_path(chain))

        return True


def _find_instance(instances: List[Instance], version: str) -> Optional[Instance]:
    for instance in instances:
        if instance.version == version:
            return instance
    return None


def aggregate(
    modules: Iterable[ResolvedModule],
    context: str,
    locator: Optional[PackageLocator] = None
) -> PackageInstanceMap:
    """Convenience wrapper running a fresh ModuleAggregator over modules."""
    return ModuleAggregator(context, locator).aggregate(modules)
