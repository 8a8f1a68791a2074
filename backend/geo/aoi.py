from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class BBox:
    """
    WGS84 bounding box in lon/lat degrees.

    Convention used throughout this repo:
    - minLon, minLat, maxLon, maxLat
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_points(cls, coords: Iterable[tuple[float, float]]) -> "BBox":
        """
        Smallest box holding every (lon, lat) pair.
        """
        lons: list[float] = []
        lats: list[float] = []
        for lon, lat in coords:
            lons.append(float(lon))
            lats.append(float(lat))
        if not lons:
            raise ValueError("BBox.from_points needs at least one coordinate")
        return cls(min_lon=min(lons), min_lat=min(lats), max_lon=max(lons), max_lat=max(lats))

    def normalized(self) -> "BBox":
        min_lon = min(self.min_lon, self.max_lon)
        max_lon = max(self.min_lon, self.max_lon)
        min_lat = min(self.min_lat, self.max_lat)
        max_lat = max(self.min_lat, self.max_lat)
        return BBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    def contains(self, lon: float, lat: float) -> bool:
        b = self.normalized()
        return b.min_lon <= lon <= b.max_lon and b.min_lat <= lat <= b.max_lat

    def center(self) -> tuple[float, float]:
        # (lon, lat); a plain midpoint, fine for the small extents of a cluster.
        b = self.normalized()
        return ((b.min_lon + b.max_lon) / 2.0, (b.min_lat + b.max_lat) / 2.0)
