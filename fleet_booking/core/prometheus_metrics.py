import logging
from prometheus_client import Counter, Histogram, Info, generate_latest
from prometheus_client.core import CollectorRegistry

logger = logging.getLogger(__name__)

# Prometheus Registry
REGISTRY = CollectorRegistry()

# Service call metrics
booking_requests_total = Counter(
    'fleet_booking_requests_total',
    'Total booking service calls',
    ['status', 'service', 'method'],
    registry=REGISTRY
)

booking_duration_seconds = Histogram(
    'fleet_booking_duration_seconds',
    'Booking service call duration in seconds',
    ['service', 'method'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
    registry=REGISTRY
)

# Business metrics
reservations_created_total = Counter(
    'fleet_booking_reservations_created_total',
    'Reservations persisted in confirmed state',
    registry=REGISTRY
)

booking_conflicts_total = Counter(
    'fleet_booking_conflicts_total',
    'Bookings rejected by the availability re-check',
    registry=REGISTRY
)

reservations_cancelled_total = Counter(
    'fleet_booking_reservations_cancelled_total',
    'Reservations cancelled before their start time',
    registry=REGISTRY
)

system_info = Info(
    'fleet_booking_info',
    'System information',
    registry=REGISTRY
)


class PrometheusMetricsCollector:
    """Records service call and booking outcome metrics"""

    def __init__(self):
        system_info.info({
            'version': '1.0.0',
            'service': 'fleet-booking'
        })

    def record_service_call(
        self,
        service_name: str,
        method_name: str,
        duration_seconds: float,
        success: bool,
    ):
        status = 'success' if success else 'error'

        booking_requests_total.labels(
            status=status,
            service=service_name,
            method=method_name
        ).inc()

        booking_duration_seconds.labels(
            service=service_name,
            method=method_name
        ).observe(duration_seconds)

    def record_reservation_created(self):
        reservations_created_total.inc()

    def record_booking_conflict(self):
        booking_conflicts_total.inc()

    def record_reservation_cancelled(self):
        reservations_cancelled_total.inc()

    def get_prometheus_metrics(self) -> bytes:
        """Prometheus text exposition of the service registry"""
        return generate_latest(REGISTRY)


prometheus_collector = PrometheusMetricsCollector()
