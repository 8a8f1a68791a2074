from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, Sequence

from clustering.policy import DEFAULT_BASE_RADIUS_PX, cluster_radius_px
from clustering.types import Cluster, ClusterPoint, ClusterResult
from geo.projection import PixelPoint, pixel_distance, project


def _is_coordinate(v: object) -> bool:
    # bool is a Real subclass; a True latitude is bad upstream data, not 1.0.
    if v is None or isinstance(v, bool) or not isinstance(v, Real):
        return False
    try:
        return math.isfinite(float(v))
    except OverflowError:
        # Ints beyond float range.
        return False


def sanitize_points(points: Iterable[ClusterPoint]) -> tuple[list[ClusterPoint], int]:
    """
    Split off points with missing or non-finite coordinates.

    Bad upstream rows are dropped and counted instead of raising so the map stays usable.
    """
    valid: list[ClusterPoint] = []
    dropped = 0
    for p in points:
        if _is_coordinate(getattr(p, "lat", None)) and _is_coordinate(getattr(p, "lng", None)):
            valid.append(p)
        else:
            dropped += 1
    return valid, dropped


def _make_cluster(members: list[ClusterPoint]) -> Cluster:
    seed = members[0]
    n = len(members)
    if n == 1:
        # Singletons keep the exact source coordinates (no float round-trip).
        return Cluster(
            id=seed.id,
            lat=seed.lat,
            lng=seed.lng,
            point_count=1,
            members=(seed,),
            is_cluster=False,
        )
    return Cluster(
        id=seed.id,
        lat=sum(p.lat for p in members) / n,
        lng=sum(p.lng for p in members) / n,
        point_count=n,
        members=tuple(members),
        is_cluster=True,
    )


def cluster_points(
    points: Sequence[ClusterPoint],
    *,
    zoom: float,
    base_radius: float = DEFAULT_BASE_RADIUS_PX,
) -> list[Cluster]:
    """
    Greedy seed-anchored clustering in screen pixels.

    Points are visited in input order. Each unprocessed point seeds a group and pulls in
    every later unprocessed point strictly closer than the radius *to the seed*. Membership
    is not transitive: a chain of neighbours out of the seed's reach stays separate.

    O(N^2); fine for the hundreds of pins a map view holds.
    """
    radius = cluster_radius_px(zoom, base_radius)
    n = len(points)
    if n == 0:
        return []
    if radius <= 0:
        # distance < 0 never holds; skip projecting altogether.
        return [_make_cluster([p]) for p in points]

    projected: list[PixelPoint] = [project(p.lat, p.lng, zoom) for p in points]
    # Track by position so points sharing an id are never lost.
    processed: set[int] = set()
    out: list[Cluster] = []

    for i in range(n):
        if i in processed:
            continue
        processed.add(i)
        group = [points[i]]
        seed_px = projected[i]
        for j in range(i + 1, n):
            if j in processed:
                continue
            if pixel_distance(seed_px, projected[j]) < radius:
                processed.add(j)
                group.append(points[j])
        out.append(_make_cluster(group))

    return out


def cluster_pins(
    points: Iterable[ClusterPoint],
    *,
    zoom: float,
    base_radius: float = DEFAULT_BASE_RADIUS_PX,
) -> ClusterResult:
    """
    Sanitize + cluster. The usual entry point for a render pass.
    """
    valid, dropped = sanitize_points(points)
    clusters = cluster_points(valid, zoom=zoom, base_radius=base_radius)
    return ClusterResult(
        clusters=clusters,
        zoom=float(zoom),
        radius_px=cluster_radius_px(zoom, base_radius),
        dropped=dropped,
    )
