"""Tests for FreshnessDecorator: decoration, change fan-out and lifecycle."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from hotpotato.config.models import Corner, HotPotatoConfig
from hotpotato.decorator import Decoration, FreshnessDecorator, LabelsChangedEvent
from hotpotato.freshness import (
    ChangeEvent,
    ChangeEventType,
    DeltaFlag,
    DeltaKind,
    Freshness,
    ResourceDelta,
    ResourceType,
    build_delta_tree,
    file_timestamp_ms,
)


# ── Helpers ──────────────────────────────────────────────────────────


def _content_event(*paths: str, root: str = "/ws") -> ChangeEvent:
    leaves = [
        ResourceDelta(p, DeltaKind.changed, ResourceType.file, DeltaFlag.content)
        for p in paths
    ]
    return ChangeEvent(ChangeEventType.post_change, build_delta_tree(root, leaves))


def _malformed_event() -> ChangeEvent:
    root = ResourceDelta("/ws", DeltaKind.changed, ResourceType.root, children=(object(),))
    return ChangeEvent(ChangeEventType.post_change, root)


class _Clock:
    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


# ── decorate ─────────────────────────────────────────────────────────


class TestDecorate:
    def test_end_to_end_aging(self, tmp_path: Path, fake_host, sample_config):
        """Hot right after a save, cold after 15s, undecorated after 200s."""
        f = tmp_path / "main.py"
        f.write_text("print('hi')")
        clock = _Clock(file_timestamp_ms(f))

        with FreshnessDecorator(sample_config, fake_host, clock=clock) as decorator:
            assert decorator.decorate(f) == Decoration(Freshness.hot, Corner.top_right)
            clock.now += 15_000
            assert decorator.decorate(f).freshness is Freshness.cold
            clock.now += 185_000
            assert decorator.decorate(f) is None

    def test_uses_configured_corner(self, tmp_path: Path, fake_host):
        f = tmp_path / "a.txt"
        f.write_text("x")
        cfg = HotPotatoConfig(time_multiplier_seconds=60, corner_placement=Corner.bottom_left)
        with FreshnessDecorator(cfg, fake_host) as decorator:
            assert decorator.decorate(f).corner is Corner.bottom_left

    def test_directories_not_decorated(self, tmp_path: Path, fake_host, sample_config):
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            assert decorator.decorate(tmp_path) is None
            assert decorator.decorate(tmp_path / "missing.txt") is None

    def test_thresholds_from_config(self, fake_host):
        cfg = HotPotatoConfig(time_multiplier_seconds=3)
        with FreshnessDecorator(cfg, fake_host) as decorator:
            t = decorator.thresholds
            assert (t.hot, t.warm, t.cool) == (6000, 30000, 300000)
            assert decorator.scheduler.delay_seconds == 6.0

    def test_no_label_properties(self, fake_host, sample_config):
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            assert decorator.is_label_property("/ws/a.py", "name") is False


# ── resource_changed ─────────────────────────────────────────────────


class TestResourceChanged:
    def test_fans_out_changed_files(self, fake_host, fake_source, sample_config):
        received: list[LabelsChangedEvent] = []
        with FreshnessDecorator(sample_config, fake_host, source=fake_source) as decorator:
            decorator.add_listener(received.append)
            fake_source.fire(_content_event("/ws/a.py", "/ws/pkg/b.py"))

        assert len(received) == 1
        assert received[0].source is decorator
        assert received[0].elements == {"/ws/a.py", "/ws/pkg/b.py"}

    def test_listeners_called_in_registration_order(self, fake_host, sample_config):
        order: list[str] = []
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            decorator.add_listener(lambda e: order.append("first"))
            decorator.add_listener(lambda e: order.append("second"))
            decorator.resource_changed(_content_event("/ws/a.py"))
        assert order == ["first", "second"]

    def test_empty_change_set_still_notifies(self, fake_host, sample_config):
        listener = MagicMock()
        added = ResourceDelta("/ws/new.py", DeltaKind.added)
        event = ChangeEvent(ChangeEventType.post_change, build_delta_tree("/ws", [added]))
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            decorator.add_listener(listener)
            decorator.resource_changed(event)
        listener.assert_called_once()
        assert listener.call_args.args[0].elements == frozenset()

    def test_pre_change_events_ignored(self, fake_host, sample_config):
        listener = MagicMock()
        event = _content_event("/ws/a.py")
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            decorator.add_listener(listener)
            decorator.resource_changed(ChangeEvent(ChangeEventType.pre_change, event.delta))
            decorator.resource_changed(ChangeEvent(ChangeEventType.post_change, None))
        listener.assert_not_called()

    def test_removed_listener_not_called(self, fake_host, sample_config):
        listener = MagicMock()
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            decorator.add_listener(listener)
            decorator.remove_listener(listener)
            decorator.remove_listener(listener)
            decorator.resource_changed(_content_event("/ws/a.py"))
        listener.assert_not_called()

    def test_malformed_tree_stops_refreshes(self, fake_host, sample_config, caplog):
        """A broken tree is logged once, stops the loop and never raises."""
        listener = MagicMock()
        decorator = FreshnessDecorator(
            sample_config, fake_host, refresh_interval=0.05
        )
        decorator.add_listener(listener)
        try:
            with caplog.at_level(logging.ERROR, logger="hotpotato.decorator"):
                decorator.resource_changed(_malformed_event())

            assert decorator.stopped
            listener.assert_not_called()
            errors = [r for r in caplog.records if r.levelno == logging.ERROR]
            assert len(errors) == 1
            assert "resource change update" in errors[0].getMessage()
            assert errors[0].exc_info is not None

            decorator.scheduler.join(timeout=2)
            seen = fake_host.updates
            time.sleep(0.3)
            assert fake_host.updates == seen
        finally:
            decorator.dispose()

    def test_notifications_still_delivered_after_stop(self, fake_host, sample_config):
        """Only the periodic loop is stopped; later notifications are still handled."""
        listener = MagicMock()
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            decorator.add_listener(listener)
            decorator.resource_changed(_malformed_event())
            decorator.resource_changed(_content_event("/ws/a.py"))
        listener.assert_called_once()


# ── periodic refresh & lifecycle ─────────────────────────────────────


class TestLifecycle:
    def test_periodic_refresh_goes_through_sync_exec(self, fake_host, sample_config):
        with FreshnessDecorator(sample_config, fake_host, refresh_interval=0.05):
            assert fake_host.updated.wait(2)
        assert fake_host.sync_calls >= 1
        assert fake_host.updates <= fake_host.sync_calls

    def test_default_interval_is_hot_threshold(self, fake_host, sample_config):
        with FreshnessDecorator(sample_config, fake_host) as decorator:
            assert decorator.scheduler.delay_seconds == 2.0
            assert decorator.scheduler.running

    def test_dispose_stops_refreshes(self, fake_host, sample_config):
        decorator = FreshnessDecorator(sample_config, fake_host, refresh_interval=0.05)
        assert fake_host.updated.wait(2)
        decorator.dispose()
        decorator.scheduler.join(timeout=2)

        seen = fake_host.updates
        time.sleep(0.3)
        assert fake_host.updates == seen
        assert decorator.stopped

    def test_dispose_unsubscribes(self, fake_host, fake_source, sample_config):
        decorator = FreshnessDecorator(sample_config, fake_host, source=fake_source)
        assert fake_source.listeners == [decorator.resource_changed]
        decorator.dispose()
        decorator.dispose()
        assert fake_source.listeners == []

    def test_bad_interval_leaves_source_untouched(self, fake_host, fake_source, sample_config):
        """A failed construction does not leave a listener on the source."""
        with pytest.raises(ValueError, match="positive"):
            FreshnessDecorator(
                sample_config, fake_host, source=fake_source, refresh_interval=0
            )
        assert fake_source.listeners == []

    def test_listener_error_propagates_from_fan_out(self, fake_host, sample_config):
        def broken(event: LabelsChangedEvent) -> None:
            raise RuntimeError("render failed")

        with FreshnessDecorator(sample_config, fake_host) as decorator:
            decorator.add_listener(broken)
            with pytest.raises(RuntimeError, match="render failed"):
                decorator.resource_changed(_content_event("/ws/a.py"))
            assert not decorator.stopped

    def test_negative_multiplier_rejected(self):
        with pytest.raises(ValueError):
            HotPotatoConfig(time_multiplier_seconds=-1)
