"""Data models for proctree."""

from dataclasses import dataclass, field
from datetime import datetime

ROOT_GLYPH = ""
LAST_CHILD_GLYPH = "└──"
CHILD_GLYPH = "├──"
BLANK_FILLER = "   "
CONNECTOR_FILLER = "│  "


@dataclass(slots=True, frozen=True)
class RawProcessEntry:
    """One row of a process enumeration, as the OS reported it."""

    pid: int
    ppid: int
    name: str


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable identity snapshot of a process."""

    pid: int
    ppid: int  # May reference a process that is no longer running
    name: str  # Executable file name


@dataclass(slots=True)
class ProcessDirectory:
    """All records of one snapshot plus the parent -> children adjacency."""

    records: dict[int, ProcessRecord] = field(default_factory=dict)
    children: dict[int, list[int]] = field(default_factory=dict)

    def __len__(self) -> int:
        """Get the number of indexed processes."""
        return len(self.records)

    def __contains__(self, pid: object) -> bool:
        """Check whether pid has a record."""
        return pid in self.records

    def get(self, pid: int) -> ProcessRecord | None:
        """Get a record by pid, or None for dangling ids."""
        return self.records.get(pid)

    def children_of(self, pid: int) -> list[int]:
        """Get child pids in enumeration order."""
        return self.children.get(pid, [])


@dataclass(slots=True, frozen=True)
class ResolvedMetadata:
    """Lazily resolved per-process metadata. None means unavailable."""

    start_time: datetime | None
    owner: str | None


@dataclass(slots=True, frozen=True)
class RenderInstruction:
    """A single tree line to be drawn by the presenter."""

    indent: str
    is_root: bool
    is_last: bool
    record: ProcessRecord
    start_time_text: str
    owner_text: str

    @property
    def branch_glyph(self) -> str:
        """Get the corner/tee glyph, or nothing for a root."""
        if self.is_root:
            return ROOT_GLYPH
        return LAST_CHILD_GLYPH if self.is_last else CHILD_GLYPH

    @property
    def branch_prefix(self) -> str:
        """Get the indentation followed by the branch glyph."""
        return self.indent + self.branch_glyph

    @property
    def child_indent(self) -> str:
        """Get the indentation this node's children are drawn with."""
        if self.is_root:
            return self.indent
        return self.indent + (BLANK_FILLER if self.is_last else CONNECTOR_FILLER)
