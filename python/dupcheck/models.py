"""Core data models for dupcheck."""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Tuple

from packageurl import PackageURL


@dataclass(eq=False)
class ResolvedModule:
    """A module handed in by the build tool, linked to the module that pulled it in."""

    resource: Optional[str] = None  # Absolute path of the module's source file
    issuer: Optional['ResolvedModule'] = None
    identifier: Optional[str] = None  # Build tool's own id, for logging only

    def __eq__(self, other) -> bool:
        """Equality based on object identity, issuer chains share nodes."""
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"ResolvedModule({self.identifier or self.resource!r})"


@dataclass(frozen=True)
class PackageIdentity:
    """The name and version declared by a package.json, plus the directory owning it."""

    name: str
    version: str
    root_path: str

    @property
    def spec(self) -> str:
        """Return the identity in name@version format."""
        return f"{self.name}@{self.version}"

    @property
    def purl(self) -> str:
        """Return the npm Package URL for this identity."""
        return package_purl(self.name, self.version)

    def __str__(self) -> str:
        return self.spec


@dataclass
class Instance:
    """One installation of a package at a given version found in the module graph."""

    version: str
    path: str
    issuer: Optional[str] = None
    issuer_paths: List[str] = field(default_factory=list)

    def add_issuer_path(self, issuer_path: str) -> bool:
        """Record an issuer path unless already present. Returns True if added."""
        if issuer_path in self.issuer_paths:
            return False
        self.issuer_paths.append(issuer_path)
        return True


@dataclass(frozen=True)
class ExclusionCandidate:
    """An instance augmented with its package name, as seen by exclusion strategies."""

    name: str
    version: str
    path: str
    issuer: Optional[str]
    issuer_paths: Tuple[str, ...] = ()

    @classmethod
    def from_instance(cls, name: str, instance: Instance) -> 'ExclusionCandidate':
        return cls(
            name=name,
            version=instance.version,
            path=instance.path,
            issuer=instance.issuer,
            issuer_paths=tuple(instance.issuer_paths),
        )

    def __getitem__(self, key: str):
        """Allow mapping-style access so predicates written against dicts keep working."""
        aliases = {'issuerPaths': 'issuer_paths'}
        try:
            return getattr(self, aliases.get(key, key))
        except AttributeError:
            raise KeyError(key) from None


@dataclass
class DiagnosticSink:
    """The host's append-only error and warning lists."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def target(self, emit_error: bool) -> List[str]:
        """Return the list diagnostics should be appended to."""
        return self.errors if emit_error else self.warnings

    def __len__(self) -> int:
        return len(self.errors) + len(self.warnings)


# package name -> instances in first-encountered order
PackageInstanceMap = Dict[str, List[Instance]]

# package name -> duplicated instances, sorted by version string
DuplicateMap = Dict[str, List[Instance]]


def package_purl(name: str, version: str) -> str:
    """Build an npm purl, splitting scoped names into namespace and name."""
    namespace = None
    if name.startswith('@') and '/' in name:
        namespace, name = name.split('/', 1)
    return PackageURL(type='npm', namespace=namespace, name=name, version=version).to_string()
