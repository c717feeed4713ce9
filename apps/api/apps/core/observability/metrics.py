"""
Metrics instrumentation for the clinic data layer.

All counters are Prometheus metrics registered on the default registry.
"""
from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry for the clinic data layer.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        """Initialize metrics registry."""
        self._setup_metrics()

    def _setup_metrics(self):
        """Setup all application metrics."""

        # ===================================================================
        # Integrity Metrics
        # ===================================================================
        self.integrity_violations_total = Counter(
            'clinic_integrity_violations_total',
            'Writes rejected by the integrity layer',
            ['model', 'kind']  # kind: domain|uniqueness|referential|scheduling|...
        )

        self.integrity_check_duration_seconds = Histogram(
            'clinic_integrity_check_duration_seconds',
            'Duration of pre-write integrity checks',
            ['model'],
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5]
        )

        # ===================================================================
        # Deletion Metrics
        # ===================================================================
        self.cascade_deletions_total = Counter(
            'clinic_cascade_deletions_total',
            'Cascading deletions executed',
            ['model', 'result']  # result: success|restricted|failure
        )

        self.cascade_rows_total = Counter(
            'clinic_cascade_rows_total',
            'Rows touched by cascading deletions',
            ['action']  # deleted|nullified
        )

        # ===================================================================
        # Scheduling Metrics
        # ===================================================================
        self.appointments_booked_total = Counter(
            'clinic_appointments_booked_total',
            'Appointment booking attempts',
            ['result']  # success|conflict
        )

        self.appointment_transitions_total = Counter(
            'clinic_appointment_transitions_total',
            'Appointment status transitions',
            ['from_status', 'to_status', 'result']
        )


# Global metrics instance
metrics = MetricsRegistry()
