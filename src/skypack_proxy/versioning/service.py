"""Resolution service routing descriptors through the ordered resolvers."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..common.logging_utils import extra_context
from ..errors import NotSemver
from ..reporting import Report
from .models import Descriptor, Locator, ReferenceKind, ResolutionResult
from .parser import classify_reference
from .resolvers import Resolver, SemverResolver, TagResolver

logger = logging.getLogger(__name__)


class VersionResolutionService:
    """Try resolvers in a fixed priority: tags before ranges."""

    def __init__(self, resolvers: Optional[Sequence[Resolver]] = None):
        if resolvers is None:
            resolvers = [TagResolver(), SemverResolver()]
        self.resolvers: List[Resolver] = list(resolvers)

    def supports(self, descriptor: Descriptor) -> bool:
        """False means the caller must try another resolution strategy."""
        return classify_reference(descriptor.range).kind is not ReferenceKind.UNSUPPORTED

    def resolver_for_descriptor(self, descriptor: Descriptor) -> Optional[Resolver]:
        for resolver in self.resolvers:
            if resolver.supports_descriptor(descriptor):
                return resolver
        return None

    def resolver_for_locator(self, locator: Locator) -> Optional[Resolver]:
        for resolver in self.resolvers:
            if resolver.supports_locator(locator):
                return resolver
        return None

    def get_candidates(self, descriptor: Descriptor, report: Optional[Report] = None) -> List[Locator]:
        """Return candidates for descriptor, or [] when no resolver applies."""
        if not self.supports(descriptor):
            return []
        resolver = self.resolver_for_descriptor(descriptor)
        if resolver is None:
            return []
        return resolver.get_candidates(descriptor, report)

    def resolve_descriptor(self, descriptor: Descriptor, report: Optional[Report] = None) -> ResolutionResult:
        """Resolve descriptor to its preferred locator and package description.

        Tag candidates re-enter resolution through whichever resolver
        supports the narrowed locator.
        """
        report = report if report is not None else Report()
        candidates = self.get_candidates(descriptor, report)
        logger.info(
            "Resolved %d candidate(s) for %s@%s",
            len(candidates),
            descriptor.identity.full_name,
            descriptor.range,
            extra=extra_context(
                event="resolution",
                component="service",
                kind=classify_reference(descriptor.range).kind.value,
                candidate_count=len(candidates),
            ),
        )
        if not candidates:
            return ResolutionResult(descriptor=descriptor, candidates=[], locator=None, package=None)

        locator = candidates[0]
        resolver = self.resolver_for_locator(locator)
        if resolver is None:
            raise NotSemver(locator.reference)
        package = resolver.resolve(locator)
        return ResolutionResult(descriptor=descriptor, candidates=candidates, locator=locator, package=package)
