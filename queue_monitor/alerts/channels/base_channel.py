"""
Base notification channel interface.
"""

from abc import ABC, abstractmethod
import logging

from queue_monitor.alerts.trigger import Direction
from queue_monitor.utils.helpers import format_number

logger = logging.getLogger(__name__)


class BaseChannel(ABC):
    """Abstract base class for notification channels"""

    @abstractmethod
    def send(self, alert) -> bool:
        """
        Send alert notification.

        Args:
            alert: CandidateAlert that passed the dedup gate

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass

    def get_name(self) -> str:
        """Get channel name"""
        return self.__class__.__name__.replace('Channel', '').lower()

    def format_message(self, alert) -> str:
        """
        Render alert as human-readable text.

        Args:
            alert: CandidateAlert instance

        Returns:
            Message text, Slack markdown flavoured
        """
        verb = 'passed' if alert.direction is Direction.ABOVE else 'dropped below'

        return (
            f"Queue *{alert.queue_name}* has {verb} a threshold of "
            f"{format_number(alert.threshold)} {alert.display_name}. "
            f"Currently at *{format_number(alert.current_value)}*."
        )
