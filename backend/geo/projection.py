from __future__ import annotations

import math
from dataclasses import dataclass


TILE_SIZE = 256
_MAX_MERCATOR_LAT = 85.05112878


@dataclass(frozen=True)
class PixelPoint:
    x: float
    y: float


def world_size(zoom: float) -> float:
    """
    Width (and height) of the whole Web-Mercator world in pixels at `zoom`.
    """
    z = float(zoom)
    if not math.isfinite(z):
        raise ValueError(f"zoom must be finite, got {zoom!r}")
    return TILE_SIZE * 2.0**z


def project(lat: float, lng: float, zoom: float) -> PixelPoint:
    """
    Project lat/lng (EPSG:4326 degrees) to global pixel coordinates of the tile pyramid.

    Distances grow 2x per zoom step, so a fixed pixel radius is a fixed on-screen distance.
    Shapes stretch towards the poles; that is how Web Mercator looks and is accepted here.
    """
    size = world_size(zoom)

    # Clamp to WebMercator-supported latitudes; sin(90deg) == 1 would divide by zero.
    lat = max(-_MAX_MERCATOR_LAT, min(_MAX_MERCATOR_LAT, float(lat)))
    sin_lat = math.sin(lat * math.pi / 180.0)

    x = (float(lng) + 180.0) / 360.0 * size
    y = (0.5 - math.log((1.0 + sin_lat) / (1.0 - sin_lat)) / (4.0 * math.pi)) * size
    return PixelPoint(x=x, y=y)


def pixel_distance(a: PixelPoint, b: PixelPoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def lnglat_pixel_distance(lat1: float, lng1: float, lat2: float, lng2: float, zoom: float) -> float:
    """
    Euclidean distance in pixels between two lat/lng positions at `zoom`.
    """
    return pixel_distance(project(lat1, lng1, zoom), project(lat2, lng2, zoom))
