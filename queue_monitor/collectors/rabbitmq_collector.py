"""RabbitMQ management API collector"""

from typing import Any, Dict, List
import time
import requests

from queue_monitor.utils.helpers import build_queues_url
from queue_monitor.utils.logger import get_logger


class CollectorError(Exception):
    """Queue info could not be fetched or parsed"""


class RabbitMQCollector:
    """Fetches per-queue documents from the RabbitMQ management API"""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize collector

        Args:
            config: RabbitMQ configuration
        """
        self.config = config
        self.logger = get_logger(self.__class__.__name__)
        self.url = build_queues_url(
            config.get('protocol', 'http'),
            config.get('host', 'localhost'),
            config.get('port', 15672),
            config.get('vhost'),
        )
        self.auth = (config.get('username', 'guest'), config.get('password', 'guest'))
        self.timeout = config.get('timeout', 10)

        self.error_count = 0
        self.last_success = None
        self.last_collection_duration = 0

    def fetch(self) -> List[Any]:
        """
        Fetch raw queue documents

        Returns:
            List of per-queue documents as returned by the API

        Raises:
            CollectorError: On connection failure, non-200 status or bad payload
        """
        try:
            response = requests.get(self.url, auth=self.auth, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise CollectorError(f"Could not reach RabbitMQ API at {self.url}: {e}") from e

        if response.status_code != 200:
            raise CollectorError(f"RabbitMQ API Error: HTTP {response.status_code}")

        try:
            documents = response.json()
        except ValueError as e:
            raise CollectorError(f"Error parsing JSON from queues info API response: {e}") from e

        if not isinstance(documents, list):
            raise CollectorError(
                f"Expected a list of queues, got {type(documents).__name__}"
            )

        return documents

    def run_collection(self) -> List[Any]:
        """
        Run fetch with timing and error bookkeeping

        Returns:
            List of per-queue documents

        Raises:
            CollectorError: Re-raised after recording the failure
        """
        start_time = time.time()

        try:
            documents = self.fetch()
        except CollectorError:
            self.error_count += 1
            raise

        self.last_success = time.time()
        self.last_collection_duration = self.last_success - start_time
        self.error_count = 0

        self.logger.debug(
            f"Fetched {len(documents)} queues in {self.last_collection_duration:.3f}s"
        )
        return documents

    def is_healthy(self) -> bool:
        """
        Check if collector is healthy

        Returns:
            True if healthy, False otherwise
        """
        # Collector is unhealthy if it has failed 3 consecutive times
        return self.error_count < 3
