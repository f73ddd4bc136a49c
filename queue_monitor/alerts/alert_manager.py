"""
Alert manager for gating candidate alerts and sending notifications.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

from queue_monitor.alerts.channels.base_channel import BaseChannel
from queue_monitor.alerts.dedup import DedupDecision, DedupGate
from queue_monitor.alerts.trigger_matcher import CandidateAlert

logger = logging.getLogger(__name__)

DecisionCallback = Callable[[CandidateAlert, DedupDecision], None]


class AlertManager:
    """Gates alerts through the dedup log and dispatches survivors"""

    def __init__(self, config: Dict, gate: DedupGate,
                 channels: Optional[Sequence[BaseChannel]] = None,
                 clock: Callable[[], float] = time.time,
                 on_decision: Optional[DecisionCallback] = None):
        """
        Initialize alert manager.

        Args:
            config: Full monitor configuration dict
            gate: Dedup gate owned by the polling loop
            channels: Notification channels; built from config when omitted
            clock: Returns current time in seconds since epoch
            on_decision: Called with every candidate and its dedup decision
        """
        self.config = config
        self.gate = gate
        self.clock = clock
        self.on_decision = on_decision

        if channels is None:
            channels = self._init_channels()
        self.channels: List[BaseChannel] = list(channels)

        self.workers = config.get('monitor', {}).get('dispatch_workers', 4)
        self.executor: Optional[ThreadPoolExecutor] = None
        self._open_executor()

        logger.info("Alert manager initialized")

    def _open_executor(self) -> ThreadPoolExecutor:
        """Get the dispatch pool, starting a new one after shutdown()"""
        if self.executor is None:
            self.executor = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix='dispatch')
        return self.executor

    def _init_channels(self) -> List[BaseChannel]:
        """Initialize notification channels based on config"""
        channels = []

        if self.config.get('slack', {}).get('enabled', False):
            try:
                from queue_monitor.alerts.channels.slack_channel import SlackChannel
                channels.append(SlackChannel(self.config['slack']))
            except (KeyError, ValueError) as e:
                logger.error(f"Failed to initialize slack channel: {e}")

        if self.config.get('webhook', {}).get('enabled', False):
            try:
                from queue_monitor.alerts.channels.webhook_channel import WebhookChannel
                channels.append(WebhookChannel(self.config['webhook']))
            except (KeyError, ValueError) as e:
                logger.error(f"Failed to initialize webhook channel: {e}")

        if not channels:
            logger.warning("No notification channels enabled")

        return channels

    def gate_alerts(self, candidates: Sequence[CandidateAlert]) -> List[CandidateAlert]:
        """
        Pass candidates through the dedup gate.

        Runs synchronously so every gate update happens before dispatch.

        Args:
            candidates: Candidate alerts of the current tick

        Returns:
            Candidates that should be notified
        """
        notify = []
        for candidate in candidates:
            key = self.gate.key_for(candidate)

            try:
                now = self.clock()
            except Exception as e:
                # Dropping one alert beats risking a storm of duplicates
                logger.error(f"Unable to read clock, dropping alert for {key}: {e}", exc_info=True)
                continue

            decision = self.gate.check(key, now)

            if self.on_decision:
                self.on_decision(candidate, decision)

            if decision.should_notify:
                logger.info(
                    f"Alert {decision.value}: queue {candidate.queue_name}, "
                    f"{candidate.metric_kind.value}={candidate.current_value} "
                    f"(trigger {candidate.trigger_id})"
                )
                notify.append(candidate)
            else:
                logger.debug(f"Suppressed repeat alert for {key}")

        return notify

    def dispatch(self, alerts: Sequence[CandidateAlert]) -> List[Future]:
        """
        Send alerts through every channel concurrently.

        Args:
            alerts: Alerts that passed the gate

        Returns:
            One future per (alert, channel) send
        """
        futures = []
        for alert in alerts:
            for channel in self.channels:
                future = self._open_executor().submit(self._send, channel, alert)
                futures.append(future)

        return futures

    def _send(self, channel: BaseChannel, alert: CandidateAlert) -> bool:
        """Send one alert through one channel, logging any failure"""
        try:
            success = channel.send(alert)
        except Exception as e:
            logger.error(f"Error sending notification via {channel.get_name()}: {e}", exc_info=True)
            return False

        if not success:
            logger.error(
                f"Failed to send notification via {channel.get_name()} "
                f"for queue {alert.queue_name}"
            )
        return success

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown alert manager and wait for in-flight sends"""
        logger.info("Shutting down alert manager")
        if self.executor is not None:
            self.executor.shutdown(wait=wait)
            self.executor = None
