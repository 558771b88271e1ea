"""Process information provider backed by psutil."""

import logging
import os
import sys
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import psutil

from proctree.models import RawProcessEntry

logger = logging.getLogger(__name__)

# Errors that mean "this process can't tell us that right now"
QUERY_ERRORS = (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess)


class EnumerationFailure(Exception):
    """The OS process snapshot could not be obtained."""


class ProcessInfoProvider(Protocol):
    """Capability supplying process enumeration and per-process queries."""

    def enumerate_processes(self) -> list[RawProcessEntry]: ...

    def query_creation_time(self, pid: int) -> datetime | None: ...

    def query_creation_time_fallback(self, pid: int) -> datetime | None: ...

    def query_owner(self, pid: int) -> str | None: ...


def executable_suffix() -> str:
    """Get the platform's executable file suffix."""
    return ".exe" if sys.platform == "win32" else ""


class PsutilProvider:
    """
    Process information provider using psutil.

    Start times come from psutil first and from procfs second. Where there is
    no procfs (Windows, macOS) the second step always yields None, so a start
    time psutil can't read is reported as unavailable.

    Each per-process query opens its own psutil.Process and releases it before
    returning. Processes that exit or deny access mid-query raise the psutil
    errors listed in QUERY_ERRORS; callers decide how to degrade.
    """

    def __init__(self, proc_root: Path | str = "/proc") -> None:
        """
        Initialize the PsutilProvider.

        Args:
            proc_root: Mount point of procfs, used by the fallback start time query.
        """
        self._proc_root = Path(proc_root)
        self._boot_time: float | None = None

    def enumerate_processes(self) -> list[RawProcessEntry]:
        """
        Take a one-shot snapshot of all running processes.

        Processes that die or deny access during iteration are skipped.

        Raises:
            EnumerationFailure: If the process table can't be read at all.
        """
        try:
            return list(self._iter_entries())
        except (psutil.Error, OSError) as exc:
            raise EnumerationFailure(f"Failed to create process snapshot: {exc}") from exc

    def _iter_entries(self) -> Iterator[RawProcessEntry]:
        """Yield one entry per process, skipping ones that vanish or deny access."""
        for proc in psutil.process_iter(attrs=["pid", "ppid", "name"]):
            try:
                info = proc.info
                yield RawProcessEntry(
                    pid=info["pid"],
                    ppid=info.get("ppid") or 0,
                    name=info.get("name") or "",
                )
            except QUERY_ERRORS:
                continue

    def query_creation_time(self, pid: int) -> datetime | None:
        """Query a process's creation time directly through psutil."""
        proc = psutil.Process(pid)
        with proc.oneshot():
            created = proc.create_time()
        return datetime.fromtimestamp(created, tz=timezone.utc)

    def query_creation_time_fallback(self, pid: int) -> datetime | None:
        """
        Compute a process's creation time from procfs.

        Reads the start time in clock ticks since boot from /proc/<pid>/stat
        and adds it to the system boot time. Returns None where procfs is absent.
        """
        if not self._proc_root.is_dir():
            return None

        stat_path = self._proc_root / str(pid) / "stat"
        with open(stat_path, encoding="utf-8", errors="replace") as f:
            stat = f.read()

        # The command name is parenthesised and may itself contain spaces
        fields = stat[stat.rindex(")") + 2 :].split()
        # starttime is field 22 overall, index 19 after pid and comm
        start_ticks = int(fields[19])
        ticks_per_sec = os.sysconf(os.sysconf_names["SC_CLK_TCK"])
        started = self._get_boot_time() + start_ticks / ticks_per_sec
        return datetime.fromtimestamp(started, tz=timezone.utc)

    def _get_boot_time(self) -> float:
        """Get the system boot time, read once per provider."""
        if self._boot_time is None:
            self._boot_time = psutil.boot_time()
        return self._boot_time

    def query_owner(self, pid: int) -> str | None:
        """
        Query the account a process runs under.

        On Windows psutil reads the process token and resolves its SID to
        DOMAIN\\account. On POSIX it maps the real uid to a user name.
        """
        proc = psutil.Process(pid)
        with proc.oneshot():
            username = proc.username()
        return username or None
