"""
Merkle Engine - Tree Metrics

Prometheus metrics for the Merkle tree service.

Metrics Categories:
- Batch construction
- Incremental insertion
- Membership queries
- Current tree shape
"""

from prometheus_client import Counter, Gauge, Histogram, Info

import structlog

logger = structlog.get_logger(__name__)


class TreeMetrics:
    """
    Centralized metrics for the Merkle tree service.

    Provides visibility into:
    - Build times and batch sizes
    - Insertion volume
    - Membership hit/miss rates
    - Leaf count and height of the served tree
    """

    def __init__(self) -> None:
        """Initialize all tree metrics."""
        self._init_build_metrics()
        self._init_insert_metrics()
        self._init_query_metrics()
        self._init_shape_metrics()
        self._init_info_metrics()

    def _init_build_metrics(self) -> None:
        """Initialize batch construction metrics."""
        self.build_duration = Histogram(
            "merkle_engine_build_duration_seconds",
            "Merkle tree build time",
            buckets=[0.0001, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
        )

        self.build_size = Histogram(
            "merkle_engine_build_size",
            "Number of blocks per batch build",
            buckets=[1, 10, 50, 100, 500, 1000, 5000, 10000],
        )

    def _init_insert_metrics(self) -> None:
        """Initialize insertion metrics."""
        self.insertions = Counter(
            "merkle_engine_insertions_total",
            "Total blocks inserted incrementally",
        )

        self.insert_duration = Histogram(
            "merkle_engine_insert_duration_seconds",
            "Single block insertion time",
            buckets=[0.00001, 0.0001, 0.001, 0.01, 0.1],
        )

    def _init_query_metrics(self) -> None:
        """Initialize membership query metrics."""
        self.membership_queries = Counter(
            "merkle_engine_membership_queries_total",
            "Membership queries",
            ["result"],
        )

    def _init_shape_metrics(self) -> None:
        """Initialize tree shape metrics."""
        self.leaf_count = Gauge(
            "merkle_engine_leaf_count",
            "Number of leaves in the served tree",
        )

        self.tree_height = Gauge(
            "merkle_engine_tree_height",
            "Height of the served tree",
        )

    def _init_info_metrics(self) -> None:
        """Initialize info metrics."""
        self.service_info = Info(
            "merkle_engine_service",
            "Merkle engine service information",
        )

    # Convenience methods

    def record_build(self, duration: float, block_count: int) -> None:
        """Record a batch build."""
        self.build_duration.observe(duration)
        self.build_size.observe(block_count)

    def record_insert(self, duration: float) -> None:
        """Record a single block insertion."""
        self.insertions.inc()
        self.insert_duration.observe(duration)

    def record_membership_query(self, present: bool) -> None:
        """Record membership query outcome."""
        result = "hit" if present else "miss"
        self.membership_queries.labels(result=result).inc()

    def update_shape(self, leaf_count: int, height: int) -> None:
        """Update tree shape gauges."""
        self.leaf_count.set(leaf_count)
        self.tree_height.set(height)

    def set_service_info(self, version: str, environment: str) -> None:
        """Set service info labels."""
        self.service_info.info({
            "version": version,
            "environment": environment,
        })
        logger.debug("Service info metric set", version=version, environment=environment)


# Singleton instance
_tree_metrics: TreeMetrics | None = None


def get_tree_metrics() -> TreeMetrics:
    """Get global tree metrics instance."""
    global _tree_metrics
    if _tree_metrics is None:
        _tree_metrics = TreeMetrics()
    return _tree_metrics
