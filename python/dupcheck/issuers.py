"""Issuer chain tracing and rendering."""

import logging
from typing import List, Optional, Set

from .locator import PackageLocator
from .models import ResolvedModule

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256

ISSUER_PATH_PREFIX = '~/'
ISSUER_PATH_SEPARATOR = ' -> '


def trace_issuers(
    module: ResolvedModule,
    locator: PackageLocator,
    max_depth: int = DEFAULT_MAX_DEPTH,
    names: Optional[List[str]] = None
) -> List[str]:
    """
    Walk the issuer chain of a module and collect the packages along it.

    The walk starts at module.issuer and stops at the first issuer without a
    resource. Issuers that resolve to no package are passed through. Each
    name@version is recorded once, closest issuer first.

    Args:
        module: Module whose issuers are traced
        locator: Locator used to resolve issuer resources
        max_depth: Maximum number of issuers to visit
        names: Accumulator to extend, entries already in it are not repeated

    Returns:
        The accumulated name@version strings in traversal order
    """
    if names is None:
        names = []

    visited: Set[int] = {id(module)}
    issuer = module.issuer
    depth = 0

    while issuer is not None and issuer.resource:
        if id(issuer) in visited:
            logger.warning(f"Issuer cycle detected at {issuer!r}, stopping trace")
            break
        if depth >= max_depth:
            logger.warning(f"Issuer chain of {module!r} exceeds {max_depth} levels, truncating")
            break
        visited.add(id(issuer))
        depth += 1

        identity = locator.locate(issuer.resource)
        if identity is not None and identity.spec not in names:
            names.append(identity.spec)

        issuer = issuer.issuer

    return names


def render_issuer_path(names: List[str]) -> str:
    """
    Render a traced chain root-most first, e.g. ~/app@1.0.0 -> lib@2.0.0.

    The closest entry is dropped since the report already names the package
    it belongs to. A single-entry chain renders as a bare ~/.
    """
    remainder = list(reversed(names))[:-1]
    return ISSUER_PATH_PREFIX + ISSUER_PATH_SEPARATOR.join(remainder)
