"""Shared fixtures: on-disk package trees and module graphs."""

import json
from pathlib import Path

import pytest

from dupcheck.models import ResolvedModule


class ProjectTree:
    """An application directory with packages installed under node_modules."""

    def __init__(self, root: Path, name: str = "app", version: str = "1.0.0"):
        self.root = root
        self.write_metadata(root, {"name": name, "version": version})

    @property
    def context(self) -> str:
        return str(self.root)

    def write_metadata(self, directory: Path, metadata) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "package.json"
        if isinstance(metadata, str):
            path.write_text(metadata)
        else:
            path.write_text(json.dumps(metadata))
        return directory

    def package(self, relative: str, name: str, version: str) -> Path:
        """Install a package at root/relative."""
        return self.write_metadata(self.root / relative, {"name": name, "version": version})

    def module(self, relative: str, issuer: ResolvedModule = None) -> ResolvedModule:
        """Create a source file at root/relative and return it as a resolved module."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("module.exports = {};\n")
        return ResolvedModule(resource=str(path), issuer=issuer, identifier=relative)


@pytest.fixture
def project(tmp_path):
    """An empty application named app@1.0.0."""
    return ProjectTree(tmp_path / "app")


@pytest.fixture
def duplicated_project(project):
    """
    app@1.0.0 pulling in a@1.0.0 directly and a@2.0.0 through x@1.0.0.

    Returns the project and its modules in build order.
    """
    project.package("node_modules/a", "a", "1.0.0")
    project.package("node_modules/x", "x", "1.0.0")
    project.package("node_modules/x/node_modules/a", "a", "2.0.0")

    entry = project.module("src/index.js")
    a1 = project.module("node_modules/a/index.js", issuer=entry)
    x = project.module("node_modules/x/index.js", issuer=entry)
    a2 = project.module("node_modules/x/node_modules/a/index.js", issuer=x)
    return project, [entry, a1, x, a2]
