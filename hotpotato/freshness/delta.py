"""Resource change trees and the content-change filter over them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, IntFlag
from pathlib import Path

from hotpotato.errors import DeltaTraversalError


class DeltaKind(str, Enum):
    added = "added"
    removed = "removed"
    changed = "changed"


class DeltaFlag(IntFlag):
    """What changed about a resource. Only meaningful for ``changed`` deltas
    except for the move markers."""

    none = 0
    content = 0x100
    moved_from = 0x1000
    moved_to = 0x2000
    type = 0x8000
    markers = 0x20000


class ResourceType(str, Enum):
    file = "file"
    folder = "folder"
    project = "project"
    root = "root"


class ChangeEventType(str, Enum):
    pre_change = "pre_change"
    post_change = "post_change"


@dataclass(frozen=True)
class ResourceDelta:
    """One node of an immutable change tree."""

    path: str
    kind: DeltaKind
    resource_type: ResourceType = ResourceType.file
    flags: DeltaFlag = DeltaFlag.none
    children: tuple[ResourceDelta, ...] = ()

    @property
    def is_content_change(self) -> bool:
        return (
            self.kind is DeltaKind.changed
            and bool(self.flags & DeltaFlag.content)
            and self.resource_type is ResourceType.file
        )


@dataclass(frozen=True)
class ChangeEvent:
    """A batch of workspace changes delivered to notification listeners."""

    type: ChangeEventType
    delta: ResourceDelta | None


def iter_deltas(root: ResourceDelta) -> Iterator[ResourceDelta]:
    """Yield every node reachable from *root*, depth first.

    Raises DeltaTraversalError when a node is not a ResourceDelta, its
    children cannot be read, or the same node is reached twice.
    """
    seen: set[int] = set()
    stack: list[tuple[object, str | None]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        if not isinstance(node, ResourceDelta):
            raise DeltaTraversalError(parent, f"unexpected node {type(node).__name__}")
        if id(node) in seen:
            raise DeltaTraversalError(node.path, "node reached twice (shared or cyclic)")
        seen.add(id(node))
        try:
            children = list(node.children)
        except Exception as e:
            raise DeltaTraversalError(node.path, f"unreadable children: {e}") from e
        yield node
        stack.extend((child, node.path) for child in reversed(children))


def collect_content_changes(root: ResourceDelta) -> frozenset[str]:
    """Paths of files modified in place with a content change.

    Added and removed resources, metadata-only changes and containers are
    skipped. Every node is visited; the walk never stops early.
    """
    return frozenset(d.path for d in iter_deltas(root) if d.is_content_change)


def build_delta_tree(root: str | Path, leaves: Iterable[ResourceDelta]) -> ResourceDelta:
    """Wrap leaf deltas in ``changed`` folder nodes up to a ``root`` node.

    Leaf paths must live under *root*.
    """
    root = Path(root)
    tree: dict = {}
    for leaf in leaves:
        try:
            parts = Path(leaf.path).relative_to(root).parts
        except ValueError:
            raise ValueError(f"{leaf.path} is not under {root}") from None
        if not parts:
            raise ValueError(f"leaf delta cannot be the root itself: {leaf.path}")
        branch = tree
        for part in parts[:-1]:
            branch = branch.setdefault(part, {})
            if not isinstance(branch, dict):
                raise ValueError(f"{leaf.path} nests under a leaf delta")
        branch[parts[-1]] = leaf

    def _fold(path: Path, branch: dict, resource_type: ResourceType) -> ResourceDelta:
        children = []
        for name in sorted(branch):
            value = branch[name]
            if isinstance(value, ResourceDelta):
                children.append(value)
            else:
                children.append(_fold(path / name, value, ResourceType.folder))
        return ResourceDelta(
            path=str(path),
            kind=DeltaKind.changed,
            resource_type=resource_type,
            children=tuple(children),
        )

    return _fold(root, tree, ResourceType.root)
