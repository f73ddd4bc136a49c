"""Tests for TriggerMatcher"""

import pytest

from queue_monitor.alerts.trigger import Direction, Trigger
from queue_monitor.alerts.trigger_matcher import TriggerMatcher
from queue_monitor.metrics.extractor import Reading
from queue_monitor.metrics.metric_kind import MetricKind

READY = MetricKind.MESSAGES_READY


class TestTriggerMatcher:
    """Test matching readings against triggers"""

    def test_queue_filter(self):
        matcher = TriggerMatcher([Trigger(READY, 10.0, queue="orders")])
        readings = [
            Reading("payments", READY, 500.0),
            Reading("orders", READY, 500.0),
        ]

        candidates = matcher.match(readings)

        assert len(candidates) == 1
        assert candidates[0].queue_name == "orders"

    @pytest.mark.parametrize("direction, value, fires", [
        (Direction.ABOVE, 100.0, False),
        (Direction.ABOVE, 101.0, True),
        (Direction.BELOW, 100.0, False),
        (Direction.BELOW, 99.0, True),
    ])
    def test_direction_semantics(self, direction, value, fires):
        matcher = TriggerMatcher([Trigger(READY, 100.0, direction)])

        candidates = matcher.match([Reading("jobs", READY, value)])

        assert bool(candidates) is fires

    def test_kind_mismatch(self):
        matcher = TriggerMatcher([Trigger(READY, 1.0)])

        assert matcher.match([Reading("jobs", MetricKind.MESSAGES_TOTAL, 50.0)]) == []

    def test_candidate_fields(self):
        trigger = Trigger(READY, 50.0)
        matcher = TriggerMatcher([trigger])

        candidate = matcher.match([Reading("jobs", READY, 75.0)])[0]

        assert candidate.metric_kind is READY
        assert candidate.threshold == 50.0
        assert candidate.direction is Direction.ABOVE
        assert candidate.current_value == 75.0
        assert candidate.display_name == "ready messages"
        assert candidate.trigger_id == trigger.trigger_id

    def test_grouped_by_trigger_then_queue(self):
        matcher = TriggerMatcher([
            Trigger(MetricKind.MESSAGES_TOTAL, 1.0),
            Trigger(READY, 1.0),
        ])
        readings = [
            Reading("a", READY, 5.0),
            Reading("a", MetricKind.MESSAGES_TOTAL, 5.0),
            Reading("b", READY, 5.0),
            Reading("b", MetricKind.MESSAGES_TOTAL, 5.0),
        ]

        order = [(c.metric_kind, c.queue_name) for c in matcher.match(readings)]

        assert order == [
            (MetricKind.MESSAGES_TOTAL, "a"),
            (MetricKind.MESSAGES_TOTAL, "b"),
            (READY, "a"),
            (READY, "b"),
        ]

    def test_trigger_count(self):
        assert TriggerMatcher([]).trigger_count == 0
        assert TriggerMatcher([Trigger(READY, 1.0)]).trigger_count == 1
