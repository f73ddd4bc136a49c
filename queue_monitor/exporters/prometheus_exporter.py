"""Prometheus HTTP exporter"""

from prometheus_client import start_http_server, Gauge, Counter
from prometheus_client.core import CollectorRegistry
from queue_monitor.utils.logger import get_logger


class PrometheusExporter:
    """Exposes queue readings and monitor health as Prometheus metrics"""

    def __init__(self, config):
        """
        Initialize Prometheus exporter

        Args:
            config: Configuration dictionary
        """
        self.config = config
        self.logger = get_logger(self.__class__.__name__)

        self.enabled = config.get('prometheus', {}).get('enabled', False)
        self.host = config.get('prometheus', {}).get('host', '0.0.0.0')
        self.port = config.get('prometheus', {}).get('port', 9419)

        self.registry = CollectorRegistry()
        self.running = False

        self._setup_metrics()

    def _setup_metrics(self):
        """Setup queue and monitor self-monitoring metrics"""
        self.queue_metric = Gauge(
            'rabbitmq_queue_metric',
            'Last observed value of a queue stat',
            ['queue', 'metric'],
            registry=self.registry
        )

        self.last_success = Gauge(
            'queue_monitor_last_success_timestamp',
            'Last successful poll timestamp',
            registry=self.registry
        )

        self.collector_status = Gauge(
            'queue_monitor_collector_status',
            'Collector status (1=healthy, 0=unhealthy)',
            registry=self.registry
        )

        self.dedup_entries = Gauge(
            'queue_monitor_dedup_entries',
            'Number of tracked breaching conditions',
            registry=self.registry
        )

        self.ticks = Counter(
            'queue_monitor_ticks_total',
            'Total number of poll ticks',
            registry=self.registry
        )

        self.tick_errors = Counter(
            'queue_monitor_tick_errors_total',
            'Total number of aborted poll ticks',
            registry=self.registry
        )

        self.alert_decisions = Counter(
            'queue_monitor_alert_decisions_total',
            'Dedup decisions taken for candidate alerts',
            ['metric', 'decision'],
            registry=self.registry
        )

    def start(self):
        """Start HTTP server (if enabled)"""
        if not self.enabled:
            self.logger.debug("Prometheus exporter disabled")
            return

        try:
            self.logger.info(f"Starting Prometheus HTTP server on {self.host}:{self.port}")
            start_http_server(self.port, addr=self.host, registry=self.registry)
            self.running = True
            self.logger.info(f"Metrics available at http://{self.host}:{self.port}/metrics")
        except OSError as e:
            self.logger.error(f"Failed to start Prometheus HTTP server: {e}")
            raise

    def stop(self):
        """Stop HTTP server"""
        if self.running:
            self.running = False
            self.logger.info("Prometheus HTTP server stopped")

    def record_readings(self, readings):
        """Replace queue gauges with the readings of one tick"""
        # Drop series of queues or stats that are gone
        self.queue_metric.clear()

        for reading in readings:
            self.queue_metric.labels(
                queue=reading.queue_name,
                metric=reading.metric_kind.value
            ).set(reading.value)

    def record_tick(self, success, collector_healthy=True, timestamp=None, dedup_entries=None):
        """Record the outcome of one poll tick"""
        self.ticks.inc()
        self.collector_status.set(1 if collector_healthy else 0)
        if not success:
            self.tick_errors.inc()
            return

        if timestamp is not None:
            self.last_success.set(timestamp)
        if dedup_entries is not None:
            self.dedup_entries.set(dedup_entries)

    def record_decision(self, candidate, decision):
        """Count a dedup decision"""
        self.alert_decisions.labels(
            metric=candidate.metric_kind.value,
            decision=decision.value
        ).inc()
