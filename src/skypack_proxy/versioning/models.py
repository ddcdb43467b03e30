"""Data models for versioning and package resolution."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ReferenceKind(Enum):
    """Classes a requested reference can fall into."""
    TAG = "tag"
    RANGE = "range"
    UNSUPPORTED = "unsupported"


class LinkType(Enum):
    """How the host should install a resolved package."""
    HARD = "hard"


@dataclass(frozen=True)
class Identity:
    """Package family, independent of version."""
    name: str
    scope: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"@{self.scope}/{self.name}" if self.scope else self.name


@dataclass(frozen=True)
class Descriptor:
    """Identity plus the unresolved reference the caller asked for."""
    identity: Identity
    range: str


@dataclass(frozen=True)
class Locator:
    """Identity plus a reference pinned to a single version."""
    identity: Identity
    reference: str

    @property
    def locator_hash(self) -> str:
        return hashlib.sha256(f"{self.identity.full_name}@{self.reference}".encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ClassifiedReference:
    """Result of classifying a descriptor range."""
    kind: ReferenceKind
    payload: Optional[str]


@dataclass
class PackageDescription:
    """Finalized, installable record derived from a Locator."""
    locator: Locator
    version: str
    language_name: str = "node"
    link_type: LinkType = LinkType.HARD
    dependencies: Dict[str, str] = field(default_factory=dict)
    peer_dependencies: Dict[str, str] = field(default_factory=dict)
    dependencies_meta: Dict[str, Any] = field(default_factory=dict)
    peer_dependencies_meta: Dict[str, Any] = field(default_factory=dict)
    bin: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.locator.identity.full_name,
            "reference": self.locator.reference,
            "version": self.version,
            "languageName": self.language_name,
            "linkType": self.link_type.value,
            "dependencies": dict(self.dependencies),
            "peerDependencies": dict(self.peer_dependencies),
            "dependenciesMeta": dict(self.dependencies_meta),
            "peerDependenciesMeta": dict(self.peer_dependencies_meta),
            "bin": dict(self.bin),
        }


@dataclass
class RegistryMetadata:
    """Subset of the Skypack package document the pipeline relies on.

    ``versions`` and ``dist_tags`` are None when the field is missing or is
    not a JSON object; resolvers decide whether that is fatal.
    """
    versions: Optional[Dict[str, Any]]
    dist_tags: Optional[Dict[str, Any]]
    is_deprecated: bool = False
    description: str = ""
    license: str = ""
    keywords: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ResolutionResult:
    """Resolution outcome for a single descriptor."""
    descriptor: Descriptor
    candidates: List[Locator]
    locator: Optional[Locator]
    package: Optional[PackageDescription]

    @property
    def resolved_version(self) -> Optional[str]:
        return self.package.version if self.package else None
