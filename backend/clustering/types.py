from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from geo.aoi import BBox


@dataclass(frozen=True)
class ClusterPoint:
    id: str
    lat: float
    lng: float
    # Opaque back-reference to caller data (e.g. the pin record); never inspected here.
    payload: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Cluster:
    """
    One visual group of points.

    - point_count == 1: (lat, lng) are the member's own coordinates, untouched.
    - point_count > 1: (lat, lng) are the plain arithmetic means of member lat and lng.
    """

    id: str
    lat: float
    lng: float
    point_count: int
    members: tuple[ClusterPoint, ...]
    is_cluster: bool

    @property
    def seed(self) -> ClusterPoint:
        return self.members[0]

    @property
    def bounds(self) -> BBox:
        return BBox.from_points((p.lng, p.lat) for p in self.members)


@dataclass(frozen=True)
class ClusterResult:
    clusters: list[Cluster]
    zoom: float
    radius_px: float
    # Input points rejected for missing / non-finite coordinates.
    dropped: int = 0

    @property
    def n_points(self) -> int:
        return sum(c.point_count for c in self.clusters)
