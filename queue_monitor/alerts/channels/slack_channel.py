"""
Slack notification channel using webhooks.
"""

import logging
from typing import Dict
import requests

from queue_monitor.alerts.channels.base_channel import BaseChannel

logger = logging.getLogger(__name__)


class SlackChannel(BaseChannel):
    """Slack notification channel via webhooks"""

    def __init__(self, config: Dict):
        """
        Initialize Slack channel.

        Args:
            config: Slack configuration dict with webhook_url
        """
        self.webhook_url = config['webhook_url']
        self.channel = config.get('channel', 'alerts').lstrip('#')
        self.screen_name = config.get('screen_name', 'Queue Monitor')
        self.icon_url = config.get('icon_url')
        self.icon_emoji = config.get('icon_emoji')
        self.timeout = config.get('timeout', 10)

        logger.info(f"Slack channel initialized (channel: #{self.channel})")

    def send(self, alert) -> bool:
        """
        Send Slack notification.

        Args:
            alert: CandidateAlert instance

        Returns:
            True if sent successfully
        """
        try:
            payload = self._create_slack_payload(alert)

            response = requests.post(
                self.webhook_url,
                json=payload,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout
            )

            if response.status_code != 200:
                logger.error(
                    f"Slack API Error: HTTP {response.status_code} {response.text}"
                )
                return False

            logger.info(f"Sent message to #{self.channel} for queue {alert.queue_name}")
            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send Slack notification for queue {alert.queue_name}: {e}")
            return False

    def _create_slack_payload(self, alert) -> Dict:
        """Create Slack webhook payload"""
        payload = {
            "username": self.screen_name,
            "channel": f"#{self.channel}",
            "text": self.format_message(alert),
        }

        if self.icon_url:
            payload["icon_url"] = self.icon_url
        if self.icon_emoji:
            payload["icon_emoji"] = self.icon_emoji

        return payload
