"""Input parsers building module graphs from build tool output."""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urlparse

import requests

from .models import ResolvedModule

logger = logging.getLogger(__name__)


class StatsParseError(ValueError):
    """Raised when build output cannot be turned into a module graph."""


@dataclass
class ModuleGraph:
    """The modules of one build, in the order the build tool listed them."""

    modules: List[ResolvedModule] = field(default_factory=list)
    context: Optional[str] = None


def _is_url(path: str) -> bool:
    """Check if a path is a URL."""
    try:
        result = urlparse(path)
    except ValueError:
        return False
    return result.scheme in ('http', 'https')


def _read_content(path: str) -> str:
    """
    Read content from either a file path or URL.

    Raises:
        FileNotFoundError: If file doesn't exist
        requests.RequestException: If URL fetch fails
    """
    if _is_url(path):
        logger.info(f"Fetching content from URL: {path}")
        response = requests.get(path, timeout=30)
        response.raise_for_status()
        return response.text
    else:
        logger.info(f"Reading content from file: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()


def resource_from_identifier(identifier: str) -> Optional[str]:
    """
    Extract the resource path from a webpack module identifier.

    Loader prefixes ("babel-loader!/src/a.js"), resource queries and layer
    suffixes are stripped. Identifiers that do not end in an absolute path
    (externals, runtime modules) have no resource.
    """
    resource = identifier.rsplit('!', 1)[-1]
    resource = resource.split('|', 1)[0].split('?', 1)[0]
    if not resource or not (os.path.isabs(resource) or _is_windows_abs(resource)):
        return None
    return resource


def _is_windows_abs(path: str) -> bool:
    return len(path) > 2 and path[1] == ':' and path[2] in '\\/'


class StatsParser:
    """Parser for webpack stats.json files and the native module list format."""

    @staticmethod
    def parse_file(path: str) -> ModuleGraph:
        """Parse a stats file from a local path or URL."""
        content = _read_content(path)
        try:
            data = json.loads(content)
        except ValueError as e:
            raise StatsParseError(f"{path} is not valid JSON: {e}") from e
        return StatsParser.parse(data)

    @staticmethod
    def parse(data: Any) -> ModuleGraph:
        """
        Build a ModuleGraph from decoded stats.

        Accepts a webpack stats object (modules carrying "identifier",
        "nameForCondition" and "issuer"), a multi-compiler stats object with
        "children", or the native format:

            {"context": "/project",
             "modules": [{"id": "b", "resource": "/project/b.js", "issuer": "a"}]}

        Issuers are linked by identifier, or by id for the native format.
        """
        if not isinstance(data, dict):
            raise StatsParseError("Stats must be a JSON object")

        raw_modules = list(StatsParser._iter_raw_modules(data))
        if not raw_modules and 'modules' not in data and 'children' not in data:
            raise StatsParseError("Stats contain no modules")

        by_key: Dict[str, ResolvedModule] = {}
        ordered: List[ResolvedModule] = []
        issuers: List[Optional[str]] = []

        for raw in raw_modules:
            key = StatsParser._module_key(raw)
            if key is not None and key in by_key:
                continue

            module = ResolvedModule(resource=StatsParser._module_resource(raw), identifier=key)
            if key is not None:
                by_key[key] = module
            ordered.append(module)
            issuer = raw.get('issuer')
            issuers.append(None if issuer is None else str(issuer))

        placeholders = 0
        for module, issuer_key in zip(ordered, issuers):
            if issuer_key is None:
                continue
            issuer = by_key.get(issuer_key)
            if issuer is None:
                # Issuer not listed itself, keep what its identifier tells us
                issuer = ResolvedModule(resource=resource_from_identifier(issuer_key), identifier=issuer_key)
                by_key[issuer_key] = issuer
                placeholders += 1
            module.issuer = issuer

        context = data.get('context')
        logger.info(
            f"Parsed {len(ordered)} modules from stats"
            + (f" ({placeholders} unlisted issuers)" if placeholders else "")
        )
        return ModuleGraph(modules=ordered, context=context if isinstance(context, str) else None)

    @staticmethod
    def _iter_raw_modules(data: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        modules = data.get('modules')
        if modules is None:
            for child in data.get('children') or []:
                if isinstance(child, dict):
                    yield from StatsParser._iter_raw_modules(child)
            return

        if not isinstance(modules, list):
            raise StatsParseError("'modules' must be a list")

        for raw in modules:
            if not isinstance(raw, dict):
                logger.debug(f"Skipping non-object module entry: {raw!r}")
                continue
            yield raw
            # Concatenated modules list their inner modules
            nested = raw.get('modules')
            if isinstance(nested, list):
                yield from StatsParser._iter_raw_modules(raw)

    @staticmethod
    def _module_key(raw: Dict[str, Any]) -> Optional[str]:
        key = raw.get('identifier')
        if key is None:
            key = raw.get('id')
        return None if key is None else str(key)

    @staticmethod
    def _module_resource(raw: Dict[str, Any]) -> Optional[str]:
        for field_name in ('resource', 'nameForCondition'):
            value = raw.get(field_name)
            if isinstance(value, str) and value:
                return value
        identifier = raw.get('identifier')
        if isinstance(identifier, str):
            return resource_from_identifier(identifier)
        return None
