"""Tests for metric kinds and reading extraction"""

import pytest

from queue_monitor.metrics.extractor import (
    MalformedDocumentError,
    MalformedReadingError,
    MetricExtractor,
    Reading,
    coerce_value,
    resolve_path,
)
from queue_monitor.metrics.metric_kind import MetricKind


class TestMetricKind:
    """Test the metric kind lookup table"""

    def test_every_kind_has_path_and_name(self):
        for kind in MetricKind:
            assert kind.path
            assert kind.display_name

    def test_nested_path(self):
        assert MetricKind.MESSAGES_PUBLISHED_RATE.path == ('message_stats', 'publish_details', 'rate')
        assert MetricKind.MESSAGES_READY.path == ('messages_ready',)

    def test_from_name(self):
        assert MetricKind.from_name('messages_ready') is MetricKind.MESSAGES_READY

    def test_from_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown metric kind"):
            MetricKind.from_name('messages_lost')


class TestResolvePath:

    def test_top_level(self):
        assert resolve_path({'messages': 5}, ('messages',)) == 5

    def test_nested(self):
        doc = {'message_stats': {'publish_details': {'rate': 2.5}}}
        assert resolve_path(doc, ('message_stats', 'publish_details', 'rate')) == 2.5

    def test_missing_intermediate(self):
        assert resolve_path({'messages': 5}, ('message_stats', 'redeliver')) is None

    def test_non_mapping_intermediate(self):
        assert resolve_path({'message_stats': 7}, ('message_stats', 'redeliver')) is None


class TestCoerceValue:

    def test_numbers(self):
        assert coerce_value(3) == 3.0
        assert coerce_value(2.5) == 2.5
        assert coerce_value("12") == 12.0

    @pytest.mark.parametrize("raw", ["n/a", {}, [1], True, "nan", "inf", float("nan"), float("-inf")])
    def test_malformed(self, raw):
        with pytest.raises(MalformedReadingError):
            coerce_value(raw)


class TestMetricExtractor:
    """Test extraction of readings from queue documents"""

    @pytest.fixture
    def extractor(self):
        return MetricExtractor()

    def test_extracts_present_kinds_only(self, extractor):
        """Document with 3 known stats yields exactly 3 readings"""
        document = {
            'name': 'jobs',
            'state': 'running',
            'consumers': 2,
            'messages_ready': 75,
            'message_stats': {'publish_details': {'rate': 1.5}},
            'unknown_field': 'ignored',
        }

        readings = extractor.extract(document)

        assert readings == [
            Reading('jobs', MetricKind.CONSUMERS_TOTAL, 2.0, 'running'),
            Reading('jobs', MetricKind.MESSAGES_READY, 75.0, 'running'),
            Reading('jobs', MetricKind.MESSAGES_PUBLISHED_RATE, 1.5, 'running'),
        ]

    def test_malformed_value_drops_only_that_kind(self, extractor):
        document = {'name': 'jobs', 'state': 'running', 'messages': 'lots', 'messages_ready': 4}

        readings = extractor.extract(document)

        assert [r.metric_kind for r in readings] == [MetricKind.MESSAGES_READY]

    def test_null_value_is_absent(self, extractor):
        readings = extractor.extract({'name': 'jobs', 'messages': None})
        assert readings == []

    def test_missing_name(self, extractor):
        with pytest.raises(MalformedDocumentError):
            extractor.extract({'state': 'running', 'messages': 3})

    def test_not_a_mapping(self, extractor):
        with pytest.raises(MalformedDocumentError):
            extractor.extract(['jobs'])

    def test_restricted_kinds(self):
        extractor = MetricExtractor([MetricKind.MESSAGES_TOTAL])
        readings = extractor.extract({'name': 'jobs', 'messages': 9, 'messages_ready': 4})

        assert readings == [Reading('jobs', MetricKind.MESSAGES_TOTAL, 9.0, None)]

    def test_extract_all_keeps_document_order(self, extractor):
        documents = [
            {'name': 'a', 'state': 'running', 'messages': 1, 'messages_ready': 1},
            {'state': 'running', 'messages': 100},
            {'name': 'b', 'state': 'idle', 'messages': 2},
        ]

        readings = extractor.extract_all(documents)

        assert [(r.queue_name, r.metric_kind) for r in readings] == [
            ('a', MetricKind.MESSAGES_TOTAL),
            ('a', MetricKind.MESSAGES_READY),
            ('b', MetricKind.MESSAGES_TOTAL),
        ]
        assert readings[-1].queue_state == 'idle'

    def test_non_finite_value_dropped(self, extractor):
        readings = extractor.extract({'name': 'jobs', 'consumers': 'NaN', 'messages': 3})

        assert readings == [Reading('jobs', MetricKind.MESSAGES_TOTAL, 3.0, None)]
