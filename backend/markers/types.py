from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from clustering.types import Cluster


@dataclass(frozen=True)
class MarkerCoords:
    lat: float
    lng: float


@dataclass(frozen=True)
class MarkerSpec:
    """
    One marker the map should show after a render pass.
    """

    marker_id: str
    coords: MarkerCoords
    # Caller-defined visual payload, handed to the sink as-is.
    visual: Any
    cluster: Cluster


class MarkerSink(Protocol):
    """
    Marker capability of the host map.

    Both calls are synchronous. Exceptions are not caught by the reconciler.
    """

    def add_marker(self, marker_id: str, coords: MarkerCoords, visual: Any) -> None: ...

    def remove_marker(self, marker_id: str) -> None: ...
