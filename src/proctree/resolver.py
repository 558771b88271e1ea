"""Per-process metadata resolution with fallback and memoization."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

import psutil

from proctree.models import ResolvedMetadata
from proctree.provider import ProcessInfoProvider

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# Anything a single query may fail with; never allowed to abort traversal
RESOLUTION_ERRORS = (psutil.Error, OSError, ValueError, IndexError)

_MISSING = object()


def _now() -> datetime:
    """Get the current time in UTC."""
    return datetime.now(timezone.utc)


def format_elapsed(start_time: datetime, now: datetime) -> str:
    """
    Format the time since start_time as "{h}h {m}m {s}s ago".

    Components are truncated, hours keep counting past a day, and a start
    time in the future reads as zero.
    """
    total = max(0, int((now - start_time).total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s ago"


class MetadataResolver:
    """
    Resolves start times and owners for processes as they are visited.

    Owner lookups are memoized per pid for the lifetime of the resolver,
    failures included, since a process's owner can't change while it runs.
    Start times are not cached.
    """

    def __init__(
        self,
        provider: ProcessInfoProvider,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the MetadataResolver.

        Args:
            provider: Source of the raw per-process queries.
            clock: Returns the current time for elapsed-time text. Default: UTC now.
        """
        self._provider = provider
        self._clock = clock or _now
        self._owner_cache: dict[int, str | None] = {}

    @property
    def cache_size(self) -> int:
        """Get the number of memoized owner lookups."""
        return len(self._owner_cache)

    def resolve_start_time(self, pid: int) -> datetime | None:
        """Resolve a start time via the direct query, then the fallback."""
        queries = (
            ("direct", self._provider.query_creation_time),
            ("fallback", self._provider.query_creation_time_fallback),
        )
        for label, query in queries:
            try:
                started = query(pid)
            except RESOLUTION_ERRORS as exc:
                logger.debug("Start time %s query failed for pid %d: %r", label, pid, exc)
                continue
            if started is not None:
                return started
        return None

    def resolve_owner(self, pid: int) -> str | None:
        """Resolve the owning account, consulting the cache first."""
        cached = self._owner_cache.get(pid, _MISSING)
        if cached is not _MISSING:
            return cached

        try:
            owner = self._provider.query_owner(pid) or None
        except RESOLUTION_ERRORS as exc:
            logger.debug("Owner query failed for pid %d: %r", pid, exc)
            owner = None

        self._owner_cache[pid] = owner
        return owner

    def resolve(self, pid: int) -> ResolvedMetadata:
        """Resolve all metadata for a process."""
        return ResolvedMetadata(
            start_time=self.resolve_start_time(pid),
            owner=self.resolve_owner(pid),
        )

    def describe_start_time(self, metadata: ResolvedMetadata) -> str:
        """Get the elapsed time since start as text, or N/A."""
        if metadata.start_time is None:
            return NOT_AVAILABLE
        return format_elapsed(metadata.start_time, self._clock())

    def describe_owner(self, metadata: ResolvedMetadata) -> str:
        """Get the owning account as text, or N/A."""
        return metadata.owner or NOT_AVAILABLE
