"""
Trigger (threshold rule) data structures and loading utilities.
"""

import yaml
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional
import logging

from queue_monitor.metrics.metric_kind import MetricKind

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Side of the threshold that counts as a breach"""
    ABOVE = 'above'
    BELOW = 'below'

    def crossed(self, value: float, threshold: float) -> bool:
        """Strict comparison; a value equal to the threshold never breaches"""
        if self is Direction.ABOVE:
            return value > threshold
        return value < threshold


@dataclass(frozen=True)
class Trigger:
    """Threshold rule over one metric kind"""
    metric_kind: MetricKind
    threshold: float
    direction: Direction = Direction.ABOVE
    queue: Optional[str] = None  # None matches every queue
    name: Optional[str] = None

    def __post_init__(self):
        """Validate trigger configuration"""
        if not isinstance(self.metric_kind, MetricKind):
            raise ValueError(f"Invalid metric kind: {self.metric_kind!r}")

        if not isinstance(self.direction, Direction):
            raise ValueError(f"Invalid direction: {self.direction!r}")

        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise ValueError(f"Threshold must be a number, got {self.threshold!r}")

        if self.queue is not None and not isinstance(self.queue, str):
            raise ValueError(f"Queue filter must be a string, got {self.queue!r}")

    @property
    def trigger_id(self) -> str:
        """
        Stable identity of this trigger.

        The configured name when present, otherwise built from the rule
        itself, e.g. ``messages_ready>50@orders``.
        """
        if self.name:
            return self.name

        op = '>' if self.direction is Direction.ABOVE else '<'
        # Full precision: distinct thresholds must never share an id
        threshold = self.threshold
        if float(threshold).is_integer():
            threshold = int(threshold)
        return f"{self.metric_kind.value}{op}{threshold!r}@{self.queue or '*'}"

    def applies_to(self, reading) -> bool:
        """Check metric kind and optional queue filter against a reading"""
        if reading.metric_kind != self.metric_kind:
            return False
        return self.queue is None or self.queue == reading.queue_name


def parse_trigger(entry: Dict[str, Any]) -> Trigger:
    """
    Build a trigger from one configuration entry.

    Args:
        entry: Dict with 'type', 'threshold' and optional 'direction', 'queue', 'name'

    Raises:
        KeyError: If a required key is missing
        ValueError: If a value is invalid
    """
    threshold = entry['threshold']
    if isinstance(threshold, bool):
        raise ValueError(f"Threshold must be a number, got {threshold!r}")

    direction = str(entry.get('direction', 'above')).lower()
    try:
        direction = Direction(direction)
    except ValueError:
        raise ValueError(f"Invalid direction: {direction!r}. Must be 'above' or 'below'") from None

    return Trigger(
        metric_kind=MetricKind.from_name(entry['type']),
        threshold=float(threshold),
        direction=direction,
        queue=entry.get('queue'),
        name=entry.get('name'),
    )


def parse_triggers(entries: Optional[Iterable[Dict[str, Any]]]) -> List[Trigger]:
    """
    Build triggers from configuration entries, skipping invalid ones.

    Args:
        entries: List of trigger dicts

    Returns:
        List of Trigger objects
    """
    triggers = []
    for entry in entries or []:
        try:
            trigger = parse_trigger(entry)
            triggers.append(trigger)
            logger.debug(f"Loaded trigger: {trigger.trigger_id}")
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to load trigger {entry!r}: {e}")
            continue

    return triggers


def load_triggers(triggers_file: str) -> List[Trigger]:
    """
    Load triggers from YAML file.

    Args:
        triggers_file: Path to YAML file with a top-level 'triggers' list

    Returns:
        List of Trigger objects

    Raises:
        FileNotFoundError: If triggers file doesn't exist
        ValueError: If triggers file has invalid format
    """
    try:
        with open(triggers_file, 'r') as f:
            config = yaml.safe_load(f)

        if not config or 'triggers' not in config:
            logger.warning(f"No triggers found in {triggers_file}")
            return []

        triggers = parse_triggers(config['triggers'])
        logger.info(f"Loaded {len(triggers)} triggers from {triggers_file}")
        return triggers

    except FileNotFoundError:
        logger.error(f"Triggers file not found: {triggers_file}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML file {triggers_file}: {e}")
        raise ValueError(f"Invalid YAML format: {e}")
