"""Depth-first process tree traversal."""

import logging
from collections.abc import Iterable, Iterator

from proctree.models import ProcessDirectory, RenderInstruction
from proctree.resolver import MetadataResolver

logger = logging.getLogger(__name__)


def walk_tree(
    root_id: int,
    directory: ProcessDirectory,
    resolver: MetadataResolver,
) -> list[RenderInstruction]:
    """
    Walk the subtree under root_id and return its lines in drawing order.

    Nodes are emitted pre-order, siblings in enumeration order. A pid is
    visited at most once per call, so a cyclic adjacency still terminates.
    Child ids with no record are skipped without output. Whether a child is
    drawn as the last sibling depends on its position in the raw child list.
    """
    lines: list[RenderInstruction] = []
    visited: set[int] = set()
    # (pid, indent, is_last, is_root); popped in pre-order
    stack: list[tuple[int, str, bool, bool]] = [(root_id, "", True, True)]

    while stack:
        pid, indent, is_last, is_root = stack.pop()
        if pid in visited:
            continue
        record = directory.get(pid)
        if record is None:
            continue
        visited.add(pid)

        metadata = resolver.resolve(pid)
        line = RenderInstruction(
            indent=indent,
            is_root=is_root,
            is_last=is_last,
            record=record,
            start_time_text=resolver.describe_start_time(metadata),
            owner_text=resolver.describe_owner(metadata),
        )
        lines.append(line)

        children = directory.children_of(pid)
        child_indent = line.child_indent
        last_index = len(children) - 1
        for index in range(last_index, -1, -1):
            stack.append((children[index], child_indent, index == last_index, False))

    logger.debug("Walked %d processes under root %d", len(lines), root_id)
    return lines


def walk_forest(
    root_ids: Iterable[int],
    directory: ProcessDirectory,
    resolver: MetadataResolver,
) -> Iterator[list[RenderInstruction]]:
    """Walk each root in turn, each with a fresh visit set."""
    for root_id in root_ids:
        yield walk_tree(root_id, directory, resolver)
