"""
Trigger matcher for checking threshold rules against queue readings.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from queue_monitor.alerts.trigger import Direction, Trigger
from queue_monitor.metrics.extractor import Reading
from queue_monitor.metrics.metric_kind import MetricKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateAlert:
    """A reading that breached a trigger, pending dedup"""
    queue_name: str
    metric_kind: MetricKind
    threshold: float
    direction: Direction
    current_value: float
    display_name: str
    trigger_id: str


class TriggerMatcher:
    """Evaluates triggers against the readings of one poll tick"""

    def __init__(self, triggers: Sequence[Trigger]):
        """
        Initialize trigger matcher.

        Args:
            triggers: Triggers to evaluate, in evaluation order
        """
        self.triggers = list(triggers)

        logger.info(f"Trigger matcher initialized with {len(self.triggers)} triggers")

    def match(self, readings: Sequence[Reading]) -> List[CandidateAlert]:
        """
        Evaluate every trigger against every reading.

        Args:
            readings: Readings of the current tick

        Returns:
            Candidate alerts, grouped by trigger then by reading order
        """
        candidates = []
        for trigger in self.triggers:
            for reading in readings:
                if not trigger.applies_to(reading):
                    continue

                if not trigger.direction.crossed(reading.value, trigger.threshold):
                    logger.debug(
                        f"Trigger {trigger.trigger_id} not crossed on {reading.queue_name}: "
                        f"{reading.value}"
                    )
                    continue

                logger.debug(
                    f"Trigger {trigger.trigger_id} crossed on {reading.queue_name}: "
                    f"{reading.value}"
                )
                candidates.append(CandidateAlert(
                    queue_name=reading.queue_name,
                    metric_kind=reading.metric_kind,
                    threshold=trigger.threshold,
                    direction=trigger.direction,
                    current_value=reading.value,
                    display_name=reading.metric_kind.display_name,
                    trigger_id=trigger.trigger_id,
                ))

        return candidates

    @property
    def trigger_count(self) -> int:
        """Get total number of triggers"""
        return len(self.triggers)
