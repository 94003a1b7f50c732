"""Freshness classification, change filtering and the refresh loop."""

from hotpotato.freshness.classifier import (
    Freshness,
    Thresholds,
    classify,
    classify_path,
    file_timestamp_ms,
    now_ms,
)
from hotpotato.freshness.delta import (
    ChangeEvent,
    ChangeEventType,
    DeltaFlag,
    DeltaKind,
    ResourceDelta,
    ResourceType,
    build_delta_tree,
    collect_content_changes,
    iter_deltas,
)
from hotpotato.freshness.scheduler import RefreshScheduler

__all__ = [
    "ChangeEvent",
    "ChangeEventType",
    "DeltaFlag",
    "DeltaKind",
    "Freshness",
    "RefreshScheduler",
    "ResourceDelta",
    "ResourceType",
    "Thresholds",
    "build_delta_tree",
    "classify",
    "classify_path",
    "collect_content_changes",
    "file_timestamp_ms",
    "iter_deltas",
    "now_ms",
]
