"""Report sink for non-fatal conditions and cache observability.

Warnings (deprecated packages, missing pinned URLs) travel alongside a
successful result instead of being raised. Everything recorded here is also
mirrored to the module logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .common.logging_utils import extra_context
from .constants import MessageName

logger = logging.getLogger(__name__)


@dataclass
class ReportEntry:
    """A single reported message."""

    name: MessageName
    text: str


@dataclass
class Report:
    """Collects warnings plus cache hits and misses for one run."""

    warnings: List[ReportEntry] = field(default_factory=list)
    cache_hits: List[str] = field(default_factory=list)
    cache_misses: List[str] = field(default_factory=list)

    def report_warning(self, name: MessageName, text: str) -> None:
        self.warnings.append(ReportEntry(name, text))
        logger.warning(text, extra=extra_context(event="report_warning", message_name=name.value))

    def report_cache_hit(self, key: str) -> None:
        self.cache_hits.append(key)
        logger.debug("Cache hit: %s", key, extra=extra_context(event="cache_hit", component="cache"))

    def report_cache_miss(self, key: str, text: Optional[str] = None) -> None:
        self.cache_misses.append(key)
        logger.info(text or f"Cache miss: {key}", extra=extra_context(event="cache_miss", component="cache"))

    def has_warning(self, name: MessageName) -> bool:
        return any(entry.name == name for entry in self.warnings)
