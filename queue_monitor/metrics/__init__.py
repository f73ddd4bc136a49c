"""
Queue stat kinds and extraction of readings from raw queue documents.
"""

from queue_monitor.metrics.metric_kind import MetricKind
from queue_monitor.metrics.extractor import MetricExtractor, Reading

__all__ = ['MetricKind', 'MetricExtractor', 'Reading']
