from .engine import cluster_pins, cluster_points, sanitize_points
from .policy import DEFAULT_BASE_RADIUS_PX, cluster_radius_px
from .types import Cluster, ClusterPoint, ClusterResult

__all__ = [
    "DEFAULT_BASE_RADIUS_PX",
    "Cluster",
    "ClusterPoint",
    "ClusterResult",
    "cluster_pins",
    "cluster_points",
    "cluster_radius_px",
    "sanitize_points",
]
