"""Label decorator that marks files hot, warm or cold by modification age."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from hotpotato.config.models import Corner, HotPotatoConfig
from hotpotato.errors import DeltaTraversalError
from hotpotato.freshness.classifier import Freshness, Thresholds, classify_path, now_ms
from hotpotato.freshness.delta import ChangeEvent, ChangeEventType, collect_content_changes
from hotpotato.freshness.scheduler import RefreshScheduler
from hotpotato.interfaces.host import DecorationHost, NotificationSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decoration:
    """Overlay to draw on a file icon."""

    freshness: Freshness
    corner: Corner


@dataclass(frozen=True)
class LabelsChangedEvent:
    """Tells observers which elements need their labels recomputed."""

    source: Any
    elements: frozenset[str] = field(default_factory=frozenset)


LabelListener = Callable[[LabelsChangedEvent], None]


class FreshnessDecorator:
    """Decorates files by age and keeps those decorations current.

    On construction it derives the bucket thresholds from *config*,
    subscribes to *source* (if given) and starts a refresh loop that asks
    *host* to redraw every decoration once per hot threshold. Content
    changes reported by *source* are forwarded to label listeners as one
    batched event per notification.

    A notification tree that cannot be walked stops the refresh loop for
    good; build a new decorator to resume.
    """

    def __init__(
        self,
        config: HotPotatoConfig,
        host: DecorationHost,
        source: NotificationSource | None = None,
        clock: Callable[[], int] = now_ms,
        refresh_interval: float | None = None,
    ) -> None:
        self._config = config
        self._host = host
        self._source = source
        self._clock = clock
        self.thresholds = Thresholds.from_multiplier(config.time_multiplier_seconds)
        self.corner = config.corner_placement
        self._listeners: list[LabelListener] = []
        self._stop = threading.Event()

        interval = refresh_interval if refresh_interval is not None else self.thresholds.hot / 1000
        self._scheduler = RefreshScheduler(
            self._refresh_all, interval, stop_event=self._stop
        )

        if source is not None:
            source.add_listener(self.resource_changed)
        self._scheduler.start()

    # ------------------------------------------------------------------
    # Label provider surface
    # ------------------------------------------------------------------

    def add_listener(self, listener: LabelListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: LabelListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def is_label_property(self, element: object, prop: str) -> bool:
        return False

    def decorate(self, element: str | Path) -> Decoration | None:
        """Return the overlay for *element*, or None if it gets none.

        Only files are decorated. The timestamp is read from disk on every
        call.
        """
        path = Path(element)
        if not path.is_file():
            return None
        freshness = classify_path(path, self.thresholds, now=self._clock())
        if freshness is Freshness.none:
            return None
        return Decoration(freshness=freshness, corner=self.corner)

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def resource_changed(self, event: ChangeEvent) -> None:
        """Notify listeners about files whose content changed.

        Called from the notification source's thread. Never raises for a
        malformed tree; listener errors propagate to the caller.
        """
        if event.type is not ChangeEventType.post_change or event.delta is None:
            return
        try:
            changed = collect_content_changes(event.delta)
        except DeltaTraversalError as e:
            self._stop.set()
            logger.error("Error occurred during resource change update: %s", e, exc_info=e)
            return

        labels_event = LabelsChangedEvent(source=self, elements=changed)
        for listener in list(self._listeners):
            listener(labels_event)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    def dispose(self) -> None:
        """Unsubscribe and stop periodic refreshes. Safe to call twice."""
        if self._source is not None:
            self._source.remove_listener(self.resource_changed)
            self._source = None
        self._scheduler.stop()

    def __enter__(self) -> FreshnessDecorator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    def _refresh_all(self) -> None:
        self._host.sync_exec(self._host.update_decorations)
