"""
Queue statistics that can be watched by triggers.
"""

from enum import Enum
from typing import Dict, NamedTuple, Tuple


class MetricKind(Enum):
    """Closed set of queue stats exposed by the RabbitMQ management API"""
    CONSUMERS_TOTAL = 'consumers_total'
    MEMORY_TOTAL = 'memory_total'
    MESSAGES_TOTAL = 'messages_total'
    MESSAGES_TOTAL_RATE = 'messages_total_rate'
    MESSAGES_READY = 'messages_ready'
    MESSAGES_READY_RATE = 'messages_ready_rate'
    MESSAGES_UNACKNOWLEDGED = 'messages_unacknowledged'
    MESSAGES_UNACKNOWLEDGED_RATE = 'messages_unacknowledged_rate'
    MESSAGES_REDELIVERED = 'messages_redelivered'
    MESSAGES_REDELIVERED_RATE = 'messages_redelivered_rate'
    MESSAGES_PUBLISHED_RATE = 'messages_published_rate'

    @property
    def path(self) -> Tuple[str, ...]:
        """Key segments leading to this stat inside a queue document"""
        return _KIND_INFO[self].path

    @property
    def display_name(self) -> str:
        """Human-readable name used in alert text"""
        return _KIND_INFO[self].display_name

    @classmethod
    def from_name(cls, name: str) -> 'MetricKind':
        """
        Look up a kind by its configuration name.

        Raises:
            ValueError: If the name is not a known metric kind
        """
        try:
            return cls(name)
        except ValueError:
            valid = [kind.value for kind in cls]
            raise ValueError(f"Unknown metric kind: {name!r}. Must be one of {valid}") from None


class KindInfo(NamedTuple):
    path: Tuple[str, ...]
    display_name: str


def _path(dotted: str) -> Tuple[str, ...]:
    return tuple(dotted.split('.'))


_KIND_INFO: Dict[MetricKind, KindInfo] = {
    MetricKind.CONSUMERS_TOTAL: KindInfo(_path('consumers'), 'total number of consumers'),
    MetricKind.MEMORY_TOTAL: KindInfo(_path('memory'), 'memory consumption'),
    MetricKind.MESSAGES_TOTAL: KindInfo(_path('messages'), 'total number of messages'),
    MetricKind.MESSAGES_TOTAL_RATE: KindInfo(
        _path('messages_details.rate'), 'total messages per second'),
    MetricKind.MESSAGES_READY: KindInfo(_path('messages_ready'), 'ready messages'),
    MetricKind.MESSAGES_READY_RATE: KindInfo(
        _path('messages_ready_details.rate'), 'ready messages per second'),
    MetricKind.MESSAGES_UNACKNOWLEDGED: KindInfo(
        _path('messages_unacknowledged'), 'unacknowledged messages'),
    MetricKind.MESSAGES_UNACKNOWLEDGED_RATE: KindInfo(
        _path('messages_unacknowledged_details.rate'), 'unacknowledged messages per second'),
    MetricKind.MESSAGES_REDELIVERED: KindInfo(
        _path('message_stats.redeliver'), 'redelivered messages'),
    MetricKind.MESSAGES_REDELIVERED_RATE: KindInfo(
        _path('message_stats.redeliver_details.rate'), 'redelivered messages per second'),
    MetricKind.MESSAGES_PUBLISHED_RATE: KindInfo(
        _path('message_stats.publish_details.rate'), 'published messages per second'),
}
