from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from markers.types import MarkerCoords


@dataclass
class InMemoryMarkerSink:
    """
    Headless marker sink: keeps the current markers and a log of every call.

    Useful for server-side rendering of a marker layer and for tests. With `strict=True`
    a second add of a live id (or a remove of an unknown id) raises `ValueError`.
    """

    strict: bool = True
    markers: dict[str, tuple[MarkerCoords, Any]] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def add_marker(self, marker_id: str, coords: MarkerCoords, visual: Any) -> None:
        if self.strict and marker_id in self.markers:
            raise ValueError(f"Marker already on the map: {marker_id}")
        self.calls.append(("add", marker_id))
        self.markers[marker_id] = (coords, visual)

    def remove_marker(self, marker_id: str) -> None:
        if self.strict and marker_id not in self.markers:
            raise ValueError(f"Unknown marker: {marker_id}")
        self.calls.append(("remove", marker_id))
        self.markers.pop(marker_id, None)

    def calls_of(self, kind: str) -> list[str]:
        return [mid for k, mid in self.calls if k == kind]

    def reset_calls(self) -> None:
        self.calls.clear()
