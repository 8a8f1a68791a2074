from __future__ import annotations

import math


DEFAULT_BASE_RADIUS_PX = 50.0

# Discrete tiers; do not interpolate between them.
NO_CLUSTER_MIN_ZOOM = 10.0
NEAR_COINCIDENT_MIN_ZOOM = 8.0
NEAR_COINCIDENT_RADIUS_PX = 15.0
MID_ZOOM_MIN = 5.0
MID_ZOOM_FACTOR = 0.5


def cluster_radius_px(zoom: float, base_radius: float = DEFAULT_BASE_RADIUS_PX) -> float:
    """
    Clustering radius (pixels) for a view zoom.

    - zoom >= 10: 0, every point is drawn on its own
    - 8 <= zoom < 10: 15, only near-coincident points merge (base_radius ignored)
    - 5 <= zoom < 8: base_radius * 0.5
    - zoom < 5: base_radius
    """
    z = float(zoom)
    r = float(base_radius)
    if not math.isfinite(z):
        raise ValueError(f"zoom must be finite, got {zoom!r}")
    if not math.isfinite(r) or r < 0:
        raise ValueError(f"base_radius must be a finite non-negative number, got {base_radius!r}")

    if z >= NO_CLUSTER_MIN_ZOOM:
        return 0.0
    if z >= NEAR_COINCIDENT_MIN_ZOOM:
        return NEAR_COINCIDENT_RADIUS_PX
    if z >= MID_ZOOM_MIN:
        return r * MID_ZOOM_FACTOR
    return r
