"""Locates the package owning a file by walking up to the nearest package.json."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Any

from .models import PackageIdentity

logger = logging.getLogger(__name__)

METADATA_FILE = 'package.json'

_UNREADABLE = object()


def find_root(start: Path) -> Optional[Path]:
    """Return the nearest directory at or above start that contains a package.json."""
    for directory in (start, *start.parents):
        if (directory / METADATA_FILE).is_file():
            return directory
    return None


class PackageLocator:
    """
    Resolves file paths to the identity of the package that owns them.

    Parsed metadata is cached per package root for the lifetime of the
    locator, so one locator should be used for a single report pass only.
    """

    def __init__(self):
        self._metadata: Dict[Path, Any] = {}

    def locate(self, file_path: str) -> Optional[PackageIdentity]:
        """
        Find the closest named package above file_path.

        Metadata without a name (workspace markers and the like) is skipped by
        searching again from the directory above it. Unreadable or invalid
        metadata means the path has no package.

        Args:
            file_path: Absolute path of a module's source

        Returns:
            PackageIdentity, or None if no named package owns the path
        """
        start = Path(file_path)

        while True:
            root = find_root(start)
            if root is None:
                logger.debug(f"No {METADATA_FILE} found above {file_path}")
                return None

            metadata = self._read_metadata(root)
            if metadata is None:
                return None

            name = metadata.get('name')
            if name and isinstance(name, str):
                version = metadata.get('version')
                return PackageIdentity(
                    name=name,
                    version='' if version is None else str(version),
                    root_path=str(root),
                )

            logger.debug(f"Anonymous {METADATA_FILE} in {root}, retrying from parent")
            if root.parent == root:
                return None
            start = root.parent

    def _read_metadata(self, root: Path) -> Optional[Dict[str, Any]]:
        cached = self._metadata.get(root)
        if cached is not None:
            return None if cached is _UNREADABLE else cached

        metadata_path = root / METADATA_FILE
        try:
            with open(metadata_path, 'r', encoding='utf-8') as f:
                metadata = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {metadata_path}: {e}")
            metadata = None

        if metadata is not None and not isinstance(metadata, dict):
            logger.warning(f"Ignoring {metadata_path}: not a JSON object")
            metadata = None

        self._metadata[root] = _UNREADABLE if metadata is None else metadata
        return metadata
