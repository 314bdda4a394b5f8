"""
Prometheus metrics for the aquarium backend.

Counts the outcomes of the reconciliation core so drift between the
off-chain store and the ledger shows up on a dashboard before a player
reports it.
"""

from prometheus_client import (
    Counter,
    Info,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from backend.src.core.config import settings
from backend.src.core.logging_config import get_logger

logger = get_logger(__name__)

# Create a custom registry for our metrics
REGISTRY = CollectorRegistry()

# =============================================================================
# APPLICATION INFO METRICS
# =============================================================================

app_info = Info(
    "aquarium_backend_info", "Aquarium backend application information", registry=REGISTRY
)

# =============================================================================
# RECONCILIATION METRICS
# =============================================================================

players_registered_total = Counter(
    "aquarium_players_registered_total",
    "Total number of players created off-chain",
    registry=REGISTRY,
)

starter_packs_total = Counter(
    "aquarium_starter_packs_total",
    "Starter pack mints by outcome",
    ["consistency"],
    registry=REGISTRY,
)

onchain_failures_total = Counter(
    "aquarium_onchain_failures_total",
    "On-chain calls that failed or timed out",
    ["operation"],
    registry=REGISTRY,
)

sync_queue_transitions_total = Counter(
    "aquarium_sync_queue_transitions_total",
    "Sync queue status writes",
    ["status"],
    registry=REGISTRY,
)

# =============================================================================
# ERROR METRICS
# =============================================================================

errors_total = Counter(
    "aquarium_errors_total",
    "Total number of errors",
    ["component", "error_type"],
    registry=REGISTRY,
)

# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def init_metrics():
    """Initialize metrics with application information."""
    app_info.info(
        {
            "version": "0.1.0",
            "service": "aquarium-backend",
            "environment": settings.ENVIRONMENT,
        }
    )
    logger.info("Prometheus metrics initialized")


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST


class MetricsHelper:
    """Helper class for manual metrics tracking."""

    @staticmethod
    def track_player_registered():
        players_registered_total.inc()

    @staticmethod
    def track_starter_pack(consistency: str):
        starter_packs_total.labels(consistency=consistency).inc()

    @staticmethod
    def track_onchain_failure(operation: str):
        onchain_failures_total.labels(operation=operation).inc()

    @staticmethod
    def track_sync_transition(status: str):
        sync_queue_transitions_total.labels(status=status).inc()

    @staticmethod
    def track_error(component: str, error_type: str):
        """Track application errors."""
        errors_total.labels(component=component, error_type=error_type).inc()


# Global metrics helper instance
metrics = MetricsHelper()
