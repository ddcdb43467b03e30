"""Semver resolver: npm ranges against the Skypack version index."""

import logging
from typing import Iterable, List, Optional, Tuple

import semantic_version

from ...constants import MessageName
from ...errors import InvalidRange, NotSemver, RegistryDataInvalid
from ...registry.skypack import fetch_registry_metadata
from ...reporting import Report
from ..models import Descriptor, LinkType, Locator, PackageDescription
from ..parser import clean_version, is_tag, parse_range, parse_version, stringify_ident, strip_protocol, with_protocol
from .base import Resolver

logger = logging.getLogger(__name__)


def _sorted_matches(
    spec: semantic_version.NpmSpec, raw_versions: Iterable[str]
) -> List[Tuple[semantic_version.Version, str]]:
    """Keep versions matching spec, newest first, paired with their raw text."""
    matches = []
    for raw in raw_versions:
        ver = parse_version(raw)
        if ver is None:
            continue  # Skip invalid versions
        if spec.match(ver):
            matches.append((ver, raw))
    matches.sort(key=lambda item: item[0], reverse=True)
    return matches


class SemverResolver(Resolver):
    """Resolver for semver ranges and exact versions."""

    def supports_descriptor(self, descriptor: Descriptor) -> bool:
        payload = strip_protocol(descriptor.range)
        if payload is None:
            return False
        return is_tag(payload) or parse_range(payload) is not None

    def supports_locator(self, locator: Locator) -> bool:
        payload = strip_protocol(locator.reference)
        if payload is None:
            return False
        return clean_version(payload) is not None

    def should_persist_resolution(self, locator: Locator) -> bool:
        return True

    def _parse_descriptor_range(self, descriptor: Descriptor) -> semantic_version.NpmSpec:
        payload = strip_protocol(descriptor.range)
        spec = parse_range(payload) if payload is not None else None
        if spec is None:
            raise InvalidRange(f"Expected a valid range, got {payload if payload is not None else descriptor.range}")
        return spec

    def get_candidates(self, descriptor: Descriptor, report: Optional[Report] = None) -> List[Locator]:
        """Fetch the version index and return satisfying locators, newest first.

        Args:
            descriptor: Descriptor whose range is a ``skypack:`` npm range.
            report: Sink for the deprecation warning.

        Returns:
            List of locators; empty when nothing satisfies the range.
        """
        report = report if report is not None else Report()
        spec = self._parse_descriptor_range(descriptor)
        data = fetch_registry_metadata(descriptor.identity)

        if data.is_deprecated:
            report.report_warning(
                MessageName.DEPRECATED_PACKAGE,
                f"{stringify_ident(descriptor.identity)}@{descriptor.range} is deprecated",
            )

        if data.versions is None:
            raise RegistryDataInvalid('Skypack API returned invalid data: missing "versions" field')

        matches = _sorted_matches(spec, data.versions.keys())
        logger.debug(
            "%s: %d of %d versions satisfy %s",
            descriptor.identity.full_name,
            len(matches),
            len(data.versions),
            descriptor.range,
        )
        return [Locator(descriptor.identity, with_protocol(raw)) for _, raw in matches]

    def get_satisfying(self, descriptor: Descriptor, references: List[str]) -> List[Locator]:
        """Filter known references against the descriptor range, newest first.

        References that do not carry a parseable version are dropped.
        """
        spec = self._parse_descriptor_range(descriptor)
        payloads = []
        for reference in references:
            payload = strip_protocol(reference)
            if payload is not None:
                payloads.append(payload)
        return [Locator(descriptor.identity, with_protocol(raw)) for _, raw in _sorted_matches(spec, payloads)]

    def resolve(self, locator: Locator) -> PackageDescription:
        """Finalize locator into a dependency-free package description."""
        payload = strip_protocol(locator.reference)
        version = clean_version(payload) if payload is not None else None
        if version is None:
            raise NotSemver(locator.reference)
        # Only a skeleton file is installed; dependencies load from the CDN.
        return PackageDescription(
            locator=locator,
            version=str(version),
            link_type=LinkType.HARD,
        )
