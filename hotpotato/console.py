"""Terminal host that renders freshness decorations with rich."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from hotpotato.config.models import Corner
from hotpotato.freshness.classifier import Freshness, Thresholds, classify_path, now_ms

if TYPE_CHECKING:
    from hotpotato.decorator import Decoration, FreshnessDecorator, LabelsChangedEvent

logger = logging.getLogger(__name__)

FRESHNESS_STYLES = {
    Freshness.hot: "bold red",
    Freshness.warm: "yellow",
    Freshness.cold: "blue",
    Freshness.none: "dim",
}

_CORNER_GLYPHS = {
    Corner.top_left: "◤",
    Corner.top_right: "◥",
    Corner.bottom_left: "◣",
    Corner.bottom_right: "◢",
}


def iter_files(root: Path, ignore_patterns: Iterable[str] = ()) -> Iterator[Path]:
    """Yield files under *root*, skipping any path with an ignored component."""
    ignore = set(ignore_patterns)
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root)
        if any(part in ignore for part in rel.parts):
            continue
        if p.is_file():
            yield p


def scan_workspace(
    root: str | Path,
    thresholds: Thresholds,
    ignore_patterns: Iterable[str] = (),
    now: int | None = None,
) -> list[tuple[str, Freshness]]:
    """Classify every file under *root*. Paths are relative, in sorted order."""
    root = Path(root).resolve()
    now = now if now is not None else now_ms()
    return [
        (str(p.relative_to(root)), classify_path(p, thresholds, now=now))
        for p in iter_files(root, ignore_patterns)
    ]


def freshness_table(rows: Iterable[tuple[str, Freshness]], title: str = "Freshness") -> Table:
    table = Table(title=title)
    table.add_column("File", style="cyan")
    table.add_column("Freshness")
    for path, freshness in rows:
        style = FRESHNESS_STYLES[freshness]
        table.add_row(path, f"[{style}]{freshness.value}[/{style}]")
    return table


class ConsoleHost:
    """DecorationHost that prints a table of decorated files.

    A lock stands in for the render thread: ``sync_exec`` holds it while
    the work runs, so periodic and change-driven redraws never interleave.
    """

    def __init__(
        self,
        root: str | Path,
        console: Console | None = None,
        ignore_patterns: Iterable[str] = (),
    ) -> None:
        self.root = Path(root).resolve()
        self.console = console or Console()
        self._ignore = tuple(ignore_patterns)
        self._render_lock = threading.RLock()
        self._decorate: Callable[[Path], Decoration | None] | None = None
        self.render_count = 0

    def attach(self, decorator: FreshnessDecorator) -> None:
        """Pull decorations from *decorator* and follow its label changes."""
        self._decorate = decorator.decorate
        decorator.add_listener(self.labels_changed)

    def sync_exec(self, fn: Callable[[], None]) -> None:
        with self._render_lock:
            fn()

    def update_decorations(self) -> None:
        self._render(iter_files(self.root, self._ignore), title=f"Freshness of {self.root}")

    def labels_changed(self, event: LabelsChangedEvent) -> None:
        if not event.elements:
            return
        paths = [Path(p) for p in sorted(event.elements)]
        self.sync_exec(lambda: self._render(paths, title="Changed"))

    def _render(self, paths: Iterable[Path], title: str) -> None:
        if self._decorate is None:
            logger.debug("No decorator attached; skipping render")
            return
        table = Table(title=title)
        table.add_column("", width=1)
        table.add_column("File", style="cyan")
        table.add_column("Freshness")
        for path in paths:
            decoration = self._decorate(path)
            if decoration is None:
                continue
            style = FRESHNESS_STYLES[decoration.freshness]
            table.add_row(
                f"[{style}]{_CORNER_GLYPHS[decoration.corner]}[/{style}]",
                _display_path(path, self.root),
                f"[{style}]{decoration.freshness.value}[/{style}]",
            )
        self.console.print(table)
        self.render_count += 1


def _display_path(path: Path, root: Path) -> str:
    try:
        return str(path.resolve().relative_to(root))
    except ValueError:
        return str(path)
