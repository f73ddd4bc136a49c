"""Tests for the dedup gate"""

import threading

import pytest

from queue_monitor.alerts.dedup import DedupDecision, DedupGate, DedupKey
from queue_monitor.alerts.trigger import Direction, Trigger
from queue_monitor.alerts.trigger_matcher import CandidateAlert, TriggerMatcher
from queue_monitor.metrics.extractor import Reading
from queue_monitor.metrics.metric_kind import MetricKind

KEY = DedupKey("jobs", MetricKind.MESSAGES_READY)
T0 = 1_700_000_000.0


def make_candidate(trigger_id, threshold=50.0):
    return CandidateAlert(
        queue_name="jobs",
        metric_kind=MetricKind.MESSAGES_READY,
        threshold=threshold,
        direction=Direction.ABOVE,
        current_value=100.0,
        display_name="ready messages",
        trigger_id=trigger_id,
    )


class TestDedupGate:
    """Test the per-key notification window"""

    @pytest.fixture
    def gate(self):
        return DedupGate(expire_seconds=600)

    def test_first_fire(self, gate):
        assert gate.check(KEY, T0) is DedupDecision.NOTIFY_FIRST
        assert gate.last_notified_at(KEY) == T0
        assert len(gate) == 1

    def test_suppression_inside_window(self, gate):
        gate.check(KEY, T0)

        assert gate.check(KEY, T0 + 300) is DedupDecision.SUPPRESS
        assert gate.last_notified_at(KEY) == T0

    def test_renewal_after_window(self, gate):
        gate.check(KEY, T0)
        gate.check(KEY, T0 + 300)

        assert gate.check(KEY, T0 + 601) is DedupDecision.NOTIFY_RENEWED
        assert gate.last_notified_at(KEY) == T0 + 601

    def test_window_boundary_is_suppressed(self, gate):
        gate.check(KEY, T0)

        assert gate.check(KEY, T0 + 600) is DedupDecision.SUPPRESS

    def test_keys_are_independent(self, gate):
        other = DedupKey("orders", MetricKind.MESSAGES_READY)
        gate.check(KEY, T0)

        assert gate.check(other, T0 + 1) is DedupDecision.NOTIFY_FIRST

    def test_instances_are_independent(self, gate):
        gate.check(KEY, T0)

        assert DedupGate(expire_seconds=600).check(KEY, T0) is DedupDecision.NOTIFY_FIRST

    def test_clear(self, gate):
        gate.check(KEY, T0)
        gate.clear()

        assert len(gate) == 0
        assert gate.last_notified_at(KEY) is None

    def test_should_notify(self):
        assert DedupDecision.NOTIFY_FIRST.should_notify
        assert DedupDecision.NOTIFY_RENEWED.should_notify
        assert not DedupDecision.SUPPRESS.should_notify

    def test_concurrent_first_fire_only_once(self, gate):
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(gate.check(KEY, T0))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(DedupDecision.NOTIFY_FIRST) == 1
        assert results.count(DedupDecision.SUPPRESS) == 7


class TestDedupKeys:
    """Test key derivation for per-trigger and per-metric gating"""

    def test_per_trigger_keys_differ(self):
        gate = DedupGate(expire_seconds=600, per_trigger=True)
        first = make_candidate("ready>50", 50.0)
        second = make_candidate("ready>90", 90.0)

        assert gate.key_for(first) != gate.key_for(second)
        assert gate.check(gate.key_for(first), T0) is DedupDecision.NOTIFY_FIRST
        assert gate.check(gate.key_for(second), T0) is DedupDecision.NOTIFY_FIRST

    def test_per_metric_keys_collapse(self):
        gate = DedupGate(expire_seconds=600, per_trigger=False)
        first = make_candidate("ready>50", 50.0)
        second = make_candidate("ready>90", 90.0)

        assert gate.key_for(first) == gate.key_for(second) == KEY
        assert gate.check(gate.key_for(first), T0) is DedupDecision.NOTIFY_FIRST
        assert gate.check(gate.key_for(second), T0) is DedupDecision.SUPPRESS

    def test_close_thresholds_keep_separate_windows(self):
        """Two unnamed triggers on one queue and metric must not share an entry"""
        matcher = TriggerMatcher([
            Trigger(MetricKind.MEMORY_TOTAL, 1048576.0),
            Trigger(MetricKind.MEMORY_TOTAL, 1048580.0),
        ])
        candidates = matcher.match([Reading("jobs", MetricKind.MEMORY_TOTAL, 2e6)])
        gate = DedupGate(expire_seconds=600)

        decisions = [gate.check(gate.key_for(c), T0) for c in candidates]

        assert decisions == [DedupDecision.NOTIFY_FIRST, DedupDecision.NOTIFY_FIRST]
