"""
Time-windowed dedup of repeated alerts for a sustained breach.
"""

import logging
import threading
from enum import Enum
from typing import Dict, NamedTuple, Optional

from queue_monitor.alerts.trigger_matcher import CandidateAlert
from queue_monitor.metrics.metric_kind import MetricKind

logger = logging.getLogger(__name__)


class DedupDecision(Enum):
    """Outcome of passing a candidate alert through the gate"""
    NOTIFY_FIRST = 'notify_first'      # no entry yet for this key
    NOTIFY_RENEWED = 'notify_renewed'  # expiration window elapsed
    SUPPRESS = 'suppress'              # still inside the window

    @property
    def should_notify(self) -> bool:
        return self is not DedupDecision.SUPPRESS


class DedupKey(NamedTuple):
    queue_name: str
    metric_kind: MetricKind
    trigger_id: Optional[str] = None


class DedupGate:
    """
    Tracks when each breaching condition was last notified.

    Entries live as long as the gate; nothing is persisted.
    """

    def __init__(self, expire_seconds: float, per_trigger: bool = True):
        """
        Initialize dedup gate.

        Args:
            expire_seconds: Window after which a sustained breach notifies again
            per_trigger: Track each trigger separately; when False, triggers on
                the same queue and metric share one entry
        """
        self.expire_seconds = expire_seconds
        self.per_trigger = per_trigger
        self._last_notified: Dict[DedupKey, float] = {}
        self._lock = threading.Lock()

    def key_for(self, candidate: CandidateAlert) -> DedupKey:
        """Build the dedup key for a candidate alert"""
        trigger_id = candidate.trigger_id if self.per_trigger else None
        return DedupKey(candidate.queue_name, candidate.metric_kind, trigger_id)

    def check(self, key: DedupKey, now: float) -> DedupDecision:
        """
        Decide whether to notify and record the notification.

        Args:
            key: Dedup key of the candidate
            now: Current time in seconds since epoch

        Returns:
            The decision for this candidate
        """
        with self._lock:
            last = self._last_notified.get(key)

            if last is None:
                self._last_notified[key] = now
                return DedupDecision.NOTIFY_FIRST

            # Half-open window: exactly last + expire is still suppressed
            if last + self.expire_seconds < now:
                self._last_notified[key] = now
                return DedupDecision.NOTIFY_RENEWED

            return DedupDecision.SUPPRESS

    def last_notified_at(self, key: DedupKey) -> Optional[float]:
        """Get last notification time for a key, None if never notified"""
        with self._lock:
            return self._last_notified.get(key)

    def clear(self) -> None:
        """Forget all entries"""
        with self._lock:
            self._last_notified.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_notified)
