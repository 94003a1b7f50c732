"""Age-based freshness buckets for files."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Freshness(str, Enum):
    """Visual state of a file, from most to least recently modified."""

    hot = "hot"
    warm = "warm"
    cold = "cold"
    none = "none"


@dataclass(frozen=True)
class Thresholds:
    """Upper bounds (exclusive, milliseconds) of the hot, warm and cold buckets."""

    hot: int
    warm: int
    cool: int

    def __post_init__(self) -> None:
        if not 0 < self.hot < self.warm < self.cool:
            raise ValueError(
                f"thresholds must satisfy 0 < hot < warm < cool, got {self!r}"
            )

    @classmethod
    def from_multiplier(cls, seconds: int) -> Thresholds:
        base = seconds * 1000
        return cls(hot=base * 2, warm=base * 10, cool=base * 100)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def classify(last_modified: int, now: int, thresholds: Thresholds) -> Freshness:
    """Bucket a file by the milliseconds elapsed between *last_modified* and *now*.

    A delta exactly on a threshold belongs to the colder bucket.
    """
    delta = now - last_modified
    if delta < thresholds.hot:
        return Freshness.hot
    if delta < thresholds.warm:
        return Freshness.warm
    if delta < thresholds.cool:
        return Freshness.cold
    return Freshness.none


def file_timestamp_ms(path: str | Path) -> int | None:
    """Last modification time of *path* in milliseconds, or None if it is gone."""
    try:
        return os.stat(path).st_mtime_ns // 1_000_000
    except FileNotFoundError:
        return None


def classify_path(
    path: str | Path,
    thresholds: Thresholds,
    now: int | None = None,
) -> Freshness:
    """Classify a file on disk, reading its timestamp at call time."""
    stamp = file_timestamp_ms(path)
    if stamp is None:
        return Freshness.none
    return classify(stamp, now if now is not None else now_ms(), thresholds)
