"""Poll loop orchestration"""

import signal
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from queue_monitor.alerts.alert_manager import AlertManager
from queue_monitor.alerts.channels.base_channel import BaseChannel
from queue_monitor.alerts.dedup import DedupGate
from queue_monitor.alerts.trigger import Trigger, load_triggers, parse_triggers
from queue_monitor.alerts.trigger_matcher import CandidateAlert, TriggerMatcher
from queue_monitor.collectors.rabbitmq_collector import CollectorError, RabbitMQCollector
from queue_monitor.exporters.prometheus_exporter import PrometheusExporter
from queue_monitor.metrics.extractor import MetricExtractor
from queue_monitor.utils.logger import get_logger


class Monitor:
    """Polls queue stats, matches triggers and sends deduplicated alerts"""

    def __init__(self, config: Dict[str, Any], collector=None,
                 channels: Optional[Sequence[BaseChannel]] = None,
                 triggers: Optional[Sequence[Trigger]] = None,
                 clock: Callable[[], float] = time.time):
        """
        Initialize monitor

        Args:
            config: Configuration dictionary
            collector: Source of raw queue documents (default: RabbitMQ API)
            channels: Notification channels (default: built from config)
            triggers: Triggers to evaluate (default: loaded from config)
            clock: Returns current time in seconds since epoch
        """
        self.config = config
        self.logger = get_logger(self.__class__.__name__)
        self.poll_seconds = config['monitor']['poll_seconds']
        self._stop_event = threading.Event()
        self.running = False

        self.collector = collector or RabbitMQCollector(config['rabbitmq'])
        self.extractor = MetricExtractor()

        if triggers is None:
            triggers = self._load_triggers()
        self.matcher = TriggerMatcher(triggers)

        # Dedup state lives exactly as long as this monitor
        self.gate = DedupGate(
            config['monitor']['expire_seconds'],
            per_trigger=config['monitor'].get('dedup_per_trigger', True),
        )

        self.exporter = PrometheusExporter(config)
        self.alert_manager = AlertManager(
            config,
            self.gate,
            channels=channels,
            clock=clock,
            on_decision=self.exporter.record_decision,
        )

        if not self.matcher.trigger_count:
            self.logger.warning("No triggers configured; no alerts will be sent")

    def _load_triggers(self) -> List[Trigger]:
        """Load inline triggers and triggers from the optional triggers file"""
        triggers = parse_triggers(self.config.get('triggers'))

        triggers_file = self.config.get('triggers_file')
        if triggers_file:
            triggers.extend(load_triggers(triggers_file))

        return triggers

    def run_tick(self) -> List[CandidateAlert]:
        """
        Run one poll: fetch, extract, match, gate, dispatch

        Returns:
            Alerts handed to the notification channels
        """
        self.logger.info(f"Checking queue info at {self.collector_target()}")

        try:
            documents = self.collector.run_collection()
        except CollectorError as e:
            self.logger.error(f"Fetch failed, skipping this check: {e}")
            healthy = self.collector.is_healthy()
            if not healthy:
                self.logger.warning(
                    f"Collector is unhealthy "
                    f"(failed {self.collector.error_count} consecutive times)"
                )
            self.exporter.record_tick(success=False, collector_healthy=healthy)
            return []

        readings = self.extractor.extract_all(documents)
        self.exporter.record_readings(readings)

        candidates = self.matcher.match(readings)
        alerts = self.alert_manager.gate_alerts(candidates)

        # Gate state is already updated; sends may run in any order
        self.alert_manager.dispatch(alerts)

        self.exporter.record_tick(
            success=True,
            collector_healthy=self.collector.is_healthy(),
            timestamp=getattr(self.collector, 'last_success', None),
            dedup_entries=len(self.gate),
        )

        self.logger.info(
            f"Check passed: {len(readings)} readings, {len(candidates)} breaches, "
            f"{len(alerts)} alerts sent"
        )
        return alerts

    def run_once(self) -> List[CandidateAlert]:
        """Run a single poll and wait for its notifications to go out"""
        try:
            return self.run_tick()
        finally:
            self.alert_manager.shutdown()

    def collector_target(self) -> str:
        return getattr(self.collector, 'url', type(self.collector).__name__)

    def _handle_signal(self, signum, frame):
        """Ask the poll loop to finish; cleanup happens when the loop exits"""
        self.logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        self.stop()

    def _setup_signal_handlers(self):
        """Setup signal handlers for graceful shutdown"""
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def start(self):
        """Start polling until stopped"""
        self.logger.info(
            f"Starting monitor with {self.matcher.trigger_count} triggers, "
            f"polling every {self.poll_seconds}s"
        )
        self.running = True
        self._stop_event.clear()

        if threading.current_thread() is threading.main_thread():
            self._setup_signal_handlers()

        try:
            self.exporter.start()

            while not self._stop_event.is_set():
                try:
                    self.run_tick()
                except Exception as e:
                    self.logger.error(f"Error in poll loop: {e}", exc_info=True)

                self.logger.debug(f"Sleeping for {self.poll_seconds}s")
                self._stop_event.wait(self.poll_seconds)

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    def stop(self):
        """
        Stop the monitor

        Only signals the loop; a tick in progress finishes its dispatch
        before start() shuts the alert manager and exporter down.
        """
        self._stop_event.set()

    def _shutdown(self):
        self.logger.info("Stopping monitor...")
        self.running = False

        self.alert_manager.shutdown()
        self.exporter.stop()

        self.logger.info("Monitor stopped")
