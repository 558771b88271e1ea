"""Process directory construction and root selection."""

import logging
from collections.abc import Iterable

from proctree.models import ProcessDirectory, ProcessRecord, RawProcessEntry
from proctree.provider import EnumerationFailure, ProcessInfoProvider

logger = logging.getLogger(__name__)


def build_directory(entries: Iterable[RawProcessEntry]) -> ProcessDirectory:
    """
    Index an enumeration by pid and link every entry under its parent.

    The enumeration is consumed exactly once. A repeated pid overwrites the
    earlier record. Child lists keep enumeration order, which is the order
    siblings are later drawn in.
    """
    directory = ProcessDirectory()
    for entry in entries:
        directory.records[entry.pid] = ProcessRecord(
            pid=entry.pid,
            ppid=entry.ppid,
            name=entry.name,
        )
        directory.children.setdefault(entry.ppid, []).append(entry.pid)
    return directory


def load_directory(provider: ProcessInfoProvider) -> ProcessDirectory:
    """
    Enumerate running processes and build a directory from them.

    Raises:
        EnumerationFailure: If the provider can't produce a snapshot.
    """
    try:
        entries = provider.enumerate_processes()
    except EnumerationFailure:
        logger.debug("Process enumeration failed", exc_info=True)
        raise
    directory = build_directory(entries)
    logger.debug("Built directory of %d processes", len(directory))
    return directory


def target_executable_name(name: str, suffix: str) -> str:
    """Append the executable suffix to a bare program name."""
    if not suffix or name.lower().endswith(suffix.lower()):
        return name
    return name + suffix


def find_roots(directory: ProcessDirectory, target_name: str) -> list[int]:
    """
    Find every process whose executable name matches target_name.

    Both names are lowercased with str.lower() before comparing, without any
    locale-specific rules. Every matching record becomes a root, including
    ones that also sit below another match.
    """
    wanted = target_name.lower()
    return [pid for pid, record in directory.records.items() if record.name.lower() == wanted]
