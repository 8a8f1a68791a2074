from __future__ import annotations

from typing import Callable

from clustering.types import Cluster


CLUSTER_ID_PREFIX = "cluster-"
PIN_ID_PREFIX = "pin-"

MarkerIdFn = Callable[[Cluster], str]


def marker_id_for(
    cluster: Cluster,
    *,
    cluster_prefix: str = CLUSTER_ID_PREFIX,
    pin_prefix: str = PIN_ID_PREFIX,
) -> str:
    # Multi-point groups are keyed by their seed; singletons by the pin itself.
    if cluster.is_cluster:
        return f"{cluster_prefix}{cluster.id}"
    return f"{pin_prefix}{cluster.seed.id}"


def make_marker_id_fn(cluster_prefix: str = CLUSTER_ID_PREFIX, pin_prefix: str = PIN_ID_PREFIX) -> MarkerIdFn:
    def _fn(cluster: Cluster) -> str:
        return marker_id_for(cluster, cluster_prefix=cluster_prefix, pin_prefix=pin_prefix)

    return _fn
