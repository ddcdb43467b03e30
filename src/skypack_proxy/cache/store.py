"""Content-addressed artifact cache with single-flight generation."""

from __future__ import annotations

import hashlib
import logging
import os
import re
import tempfile
import threading
import weakref
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

from ..common.logging_utils import Timer, extra_context
from ..errors import ChecksumMismatch
from ..versioning.models import Locator
from ..versioning.parser import strip_protocol

logger = logging.getLogger(__name__)

Generator = Callable[[], bytes]
Hook = Optional[Callable[[], None]]


def compute_checksum(data: bytes) -> str:
    """Return the sha512 hex digest used as the artifact checksum."""
    return hashlib.sha512(data).hexdigest()


def cache_key(locator: Locator) -> str:
    """Build a filesystem-safe cache key for locator.

    Example: ``@preact-signals-npm-1.2.3-3f2a9c01de``.
    """
    slug = re.sub(r"[^A-Za-z0-9._@-]+", "-", locator.identity.full_name.replace("/", "-"))
    version = strip_protocol(locator.reference) or locator.reference
    version = re.sub(r"[^A-Za-z0-9._+-]+", "-", version)
    return f"{slug}-npm-{version}-{locator.locator_hash[:10]}"


class ArtifactCache(ABC):
    """Collaborator that owns artifact storage and generation de-duplication."""

    @abstractmethod
    def get_or_generate(
        self,
        key: str,
        expected_checksum: Optional[str],
        generate: Generator,
        *,
        on_hit: Hook = None,
        on_miss: Hook = None,
    ) -> Tuple[bytes, str]:
        """Return (bytes, checksum), calling generate at most once per key concurrently."""


class DirectoryArtifactCache(ArtifactCache):
    """Artifact cache stored as ``<key>.zip`` + ``<key>.checksum`` files.

    Entries are written through a temporary file and renamed into place, so
    a failed generation never leaves a partial entry behind.
    """

    def __init__(self, root: str, *, skip_integrity_check: bool = False):
        """Initialize the cache.

        Args:
            root: Directory holding cache entries; created on demand.
            skip_integrity_check: Accept entries whose checksum disagrees
                with the expected one.
        """
        self.root = root
        self.skip_integrity_check = skip_integrity_check
        # entries drop out once no caller holds the key lock
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()
        self.generations = 0

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def archive_path(self, key: str) -> str:
        return os.path.join(self.root, f"{key}.zip")

    def _checksum_path(self, key: str) -> str:
        return os.path.join(self.root, f"{key}.checksum")

    def _read(self, key: str) -> Optional[Tuple[bytes, str]]:
        path = self.archive_path(key)
        if not os.path.isfile(path):
            return None
        with open(path, "rb") as fh:
            data = fh.read()
        checksum = compute_checksum(data)
        checksum_path = self._checksum_path(key)
        if os.path.isfile(checksum_path):
            with open(checksum_path, "r", encoding="utf-8") as fh:
                stored = fh.read().strip()
            if stored != checksum:
                logger.warning("Discarding corrupted cache entry %s", key)
                return None
        return data, checksum

    def _write_atomic(self, path: str, data: bytes) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _verify(self, key: str, expected: Optional[str], actual: str) -> None:
        if expected and expected != actual and not self.skip_integrity_check:
            raise ChecksumMismatch(key, expected, actual)

    def get_or_generate(
        self,
        key: str,
        expected_checksum: Optional[str],
        generate: Generator,
        *,
        on_hit: Hook = None,
        on_miss: Hook = None,
    ) -> Tuple[bytes, str]:
        """Return the cached artifact for key, generating it on a miss.

        Raises:
            ChecksumMismatch: The artifact disagrees with expected_checksum.
        """
        with self._lock_for(key):
            cached = self._read(key)
            if cached is not None:
                data, checksum = cached
                self._verify(key, expected_checksum, checksum)
                if on_hit:
                    on_hit()
                return data, checksum

            if on_miss:
                on_miss()
            with Timer() as timer:
                data = generate()
            self.generations += 1
            checksum = compute_checksum(data)
            self._verify(key, expected_checksum, checksum)

            os.makedirs(self.root, exist_ok=True)
            self._write_atomic(self.archive_path(key), data)
            self._write_atomic(self._checksum_path(key), checksum.encode("utf-8"))
            logger.debug(
                "Cache entry committed",
                extra=extra_context(
                    event="cache_commit",
                    component="cache",
                    key=key,
                    size=len(data),
                    duration_ms=timer.duration_ms(),
                ),
            )
            return data, checksum
