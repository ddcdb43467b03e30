"""Tag resolver: narrows a dist-tag into a version reference."""

import logging
from typing import List, Optional

from ...errors import RegistryDataInvalid, TagNotFound, Unreachable
from ...registry.skypack import fetch_registry_metadata
from ...reporting import Report
from ..models import Descriptor, Locator, PackageDescription
from ..parser import is_tag, strip_protocol, with_protocol
from .base import Resolver

logger = logging.getLogger(__name__)


class TagResolver(Resolver):
    """Resolver for ``skypack:<tag>`` descriptors.

    The locators it produces carry a version reference and are finalized by
    the semver resolver; this class never finalizes anything itself.
    """

    def supports_descriptor(self, descriptor: Descriptor) -> bool:
        payload = strip_protocol(descriptor.range)
        return payload is not None and is_tag(payload)

    def supports_locator(self, locator: Locator) -> bool:
        return False

    def should_persist_resolution(self, locator: Locator) -> bool:
        raise Unreachable("Tag locators are persisted by the semver resolver")

    def get_candidates(self, descriptor: Descriptor, report: Optional[Report] = None) -> List[Locator]:
        """Look the tag up in the registry's dist-tags.

        Raises:
            RegistryDataInvalid: ``distTags`` missing, not an object, or
                mapping the tag to a non-string.
            TagNotFound: The tag is not in ``distTags``.
        """
        tag = strip_protocol(descriptor.range)
        if tag is None:
            raise Unreachable(f"Tag resolver got a foreign reference: {descriptor.range}")

        data = fetch_registry_metadata(descriptor.identity)
        if data.dist_tags is None:
            raise RegistryDataInvalid('Skypack API returned invalid data: missing "distTags" field')
        if tag not in data.dist_tags:
            raise TagNotFound(tag)

        version = data.dist_tags[tag]
        if not isinstance(version, str):
            raise RegistryDataInvalid(f'Skypack API returned invalid data: tag "{tag}" maps to {version!r}')

        logger.debug("%s: tag %s -> %s", descriptor.identity.full_name, tag, version)
        return [Locator(descriptor.identity, with_protocol(version))]

    def get_satisfying(self, descriptor: Descriptor, references: List[str]) -> List[Locator]:
        # Whether a tag matches a version cannot be known without the network.
        raise Unreachable("Tags cannot be satisfied offline")

    def resolve(self, locator: Locator) -> PackageDescription:
        raise Unreachable("Tag locators are finalized by the semver resolver")
