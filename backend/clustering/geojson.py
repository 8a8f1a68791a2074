from __future__ import annotations

import math
from typing import Any, Iterable

from clustering.types import Cluster


# Step styling matching the map's cluster layer.
_COLOR_STEPS: tuple[tuple[int, str], ...] = ((10, "#51bbd6"), (30, "#f1f075"))
_COLOR_MAX = "#f28cb1"
_RADIUS_STEPS: tuple[tuple[int, int], ...] = ((10, 20), (30, 30))
_RADIUS_MAX = 40


def _round_half_up(x: float) -> int:
    # Halves go up (1250 -> 13), not to even as built-in round() does.
    return math.floor(x + 0.5)


def abbreviate_count(n: int) -> str:
    """
    Short label for a point count: 999 -> "999", 1234 -> "1.2k", 12345 -> "12k".
    """
    n = int(n)
    if n >= 10_000:
        return f"{_round_half_up(n / 1000)}k"
    if n >= 1_000:
        return f"{_round_half_up(n / 100) / 10:g}k"
    return str(n)


def cluster_color(point_count: int) -> str:
    for limit, color in _COLOR_STEPS:
        if point_count < limit:
            return color
    return _COLOR_MAX


def cluster_circle_radius(point_count: int) -> int:
    for limit, radius in _RADIUS_STEPS:
        if point_count < limit:
            return radius
    return _RADIUS_MAX


def cluster_feature(cluster: Cluster) -> dict[str, Any]:
    props: dict[str, Any]
    if cluster.is_cluster:
        props = {
            "cluster": True,
            "cluster_id": cluster.id,
            "point_count": cluster.point_count,
            "point_count_abbreviated": abbreviate_count(cluster.point_count),
            "color": cluster_color(cluster.point_count),
            "circle_radius": cluster_circle_radius(cluster.point_count),
        }
    else:
        props = {"cluster": False, "id": cluster.id}
    return {
        "type": "Feature",
        # GeoJSON uses [lng, lat].
        "geometry": {"type": "Point", "coordinates": [cluster.lng, cluster.lat]},
        "properties": props,
    }


def clusters_to_geojson(clusters: Iterable[Cluster]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [cluster_feature(c) for c in clusters],
    }
