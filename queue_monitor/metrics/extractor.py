"""
Turns raw queue documents from the management API into typed readings.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from queue_monitor.metrics.metric_kind import MetricKind

logger = logging.getLogger(__name__)


class MalformedDocumentError(ValueError):
    """Queue document cannot be read at all (not a mapping or no name)"""


class MalformedReadingError(ValueError):
    """Stat is present in a document but is not a number"""


@dataclass(frozen=True)
class Reading:
    """One observed value of one stat on one queue"""
    queue_name: str
    metric_kind: MetricKind
    value: float
    queue_state: Optional[str] = None


def resolve_path(document: Mapping[str, Any], path: Sequence[str]) -> Optional[Any]:
    """
    Walk a nested document one key at a time.

    Args:
        document: Parsed JSON object
        path: Key segments, e.g. ('message_stats', 'publish_details', 'rate')

    Returns:
        The value at the end of the path, or None if any segment is missing

    Example:
        >>> resolve_path({'message_stats': {'redeliver': 3}}, ('message_stats', 'redeliver'))
        3
        >>> resolve_path({'messages': 10}, ('message_stats', 'redeliver')) is None
        True
    """
    current: Any = document
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def coerce_value(raw: Any) -> float:
    """
    Convert a raw stat to float.

    Raises:
        MalformedReadingError: If the value is not numeric
    """
    # JSON booleans are ints in Python; a stat is never a flag
    if isinstance(raw, bool):
        raise MalformedReadingError(f"Expected a number, got boolean {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise MalformedReadingError(f"Expected a number, got {raw!r}") from None

    # NaN never compares true against a threshold
    if not math.isfinite(value):
        raise MalformedReadingError(f"Expected a finite number, got {raw!r}")
    return value


class MetricExtractor:
    """Extracts readings for a fixed list of metric kinds"""

    def __init__(self, kinds: Optional[Iterable[MetricKind]] = None):
        """
        Initialize extractor.

        Args:
            kinds: Metric kinds to extract, in output order (default: all)
        """
        self.kinds: List[MetricKind] = list(kinds) if kinds is not None else list(MetricKind)

    def extract(self, document: Any) -> List[Reading]:
        """
        Extract readings from a single queue document.

        Kinds whose path is absent are skipped. A kind whose value is not
        numeric is logged and skipped without affecting the others.

        Raises:
            MalformedDocumentError: If the document is not an object or has no name
        """
        if not isinstance(document, Mapping):
            raise MalformedDocumentError(
                f"Queue document must be an object, got {type(document).__name__}")

        queue_name = document.get('name')
        if not isinstance(queue_name, str):
            raise MalformedDocumentError("Queue document has no 'name'")

        state = document.get('state')
        queue_state = state if isinstance(state, str) else None

        readings = []
        for kind in self.kinds:
            raw = resolve_path(document, kind.path)
            if raw is None:
                continue

            try:
                value = coerce_value(raw)
            except MalformedReadingError as e:
                logger.warning(f"Dropping {kind.value} for queue {queue_name}: {e}")
                continue

            readings.append(Reading(
                queue_name=queue_name,
                metric_kind=kind,
                value=value,
                queue_state=queue_state,
            ))

        return readings

    def extract_all(self, documents: Iterable[Any]) -> List[Reading]:
        """
        Extract readings from every queue document, in document order.

        A malformed document is logged and skipped.
        """
        readings = []
        for index, document in enumerate(documents):
            try:
                readings.extend(self.extract(document))
            except MalformedDocumentError as e:
                logger.error(f"Skipping queue document #{index}: {e}")

        logger.debug(f"Extracted {len(readings)} readings")
        return readings
