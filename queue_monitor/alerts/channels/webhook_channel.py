"""
Custom webhook notification channel.
"""

import logging
from datetime import datetime, timezone
from typing import Dict
import requests

from queue_monitor.alerts.channels.base_channel import BaseChannel

logger = logging.getLogger(__name__)


class WebhookChannel(BaseChannel):
    """Custom webhook notification channel"""

    def __init__(self, config: Dict):
        """
        Initialize webhook channel.

        Args:
            config: Webhook configuration dict with url, method, headers
        """
        self.url = config['url']
        self.method = config.get('method', 'POST').upper()
        self.headers = dict(config.get('headers') or {})
        self.timeout = config.get('timeout', 10)

        if self.method not in ('POST', 'PUT'):
            raise ValueError(f"Unsupported HTTP method: {self.method}")

        # Ensure Content-Type is set
        if 'Content-Type' not in self.headers:
            self.headers['Content-Type'] = 'application/json'

        logger.info(f"Webhook channel initialized (url: {self.url}, method: {self.method})")

    def send(self, alert) -> bool:
        """
        Send webhook notification.

        Args:
            alert: CandidateAlert instance

        Returns:
            True if sent successfully
        """
        try:
            payload = self._create_webhook_payload(alert)

            response = requests.request(
                self.method,
                self.url,
                json=payload,
                headers=self.headers,
                timeout=self.timeout
            )

            response.raise_for_status()

            logger.info(f"Webhook notification sent for queue {alert.queue_name}")
            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send webhook notification for queue {alert.queue_name}: {e}")
            return False

    def _create_webhook_payload(self, alert) -> Dict:
        """Create webhook payload"""
        return {
            "alert": {
                "trigger": alert.trigger_id,
                "status": "firing",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "text": self.format_message(alert),
            },
            "queue": alert.queue_name,
            "metric": {
                "name": alert.metric_kind.value,
                "display_name": alert.display_name,
                "value": alert.current_value,
                "threshold": alert.threshold,
                "direction": alert.direction.value,
            },
        }
