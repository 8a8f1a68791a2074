from __future__ import annotations

import math
import time
from typing import Any, Callable, Iterable

from clustering.engine import cluster_pins
from clustering.types import Cluster, ClusterPoint, ClusterResult
from markers.ids import MarkerIdFn, make_marker_id_fn
from markers.reconciler import MarkerReconciler, ReconcileStats
from markers.types import MarkerSink
from markers.visuals import LabelFn, make_visual_fn
from settings.config import ClusterSettings, load_settings
from telemetry.store import TelemetryStore


class PinLayerController:
    """
    Owns the pin marker layer of one map instance.

    - Points may be supplied up front (server-rendered initial data) or later via
      `set_points`; either way the list is replaced wholesale, never patched.
    - Nothing is drawn until `map_ready()`; that is where the reconciler (and its rendered
      id set) is created. `teardown()` clears the markers and drops it again.
    - Every point / zoom change re-runs clustering + reconciliation synchronously.
    """

    def __init__(
        self,
        sink: MarkerSink,
        *,
        initial_points: Iterable[ClusterPoint] | None = None,
        settings: ClusterSettings | None = None,
        label_for: LabelFn | None = None,
        marker_id_for: MarkerIdFn | None = None,
        visual_for: Callable[[Cluster], Any] | None = None,
        telemetry: TelemetryStore | None = None,
    ) -> None:
        self._sink = sink
        self._settings = settings or load_settings()
        self._marker_id_for = marker_id_for or make_marker_id_fn(
            self._settings.clusterIdPrefix, self._settings.pinIdPrefix
        )
        self._visual_for = visual_for or make_visual_fn(
            label_for, max_names=self._settings.popupMaxNames
        )
        self._telemetry = telemetry

        self._points: list[ClusterPoint] = list(initial_points) if initial_points is not None else []
        self._points_loaded = initial_points is not None
        self._zoom: float | None = None
        self._reconciler: MarkerReconciler | None = None
        self.last_result: ClusterResult | None = None

    @property
    def is_ready(self) -> bool:
        return self._reconciler is not None

    @property
    def points_loaded(self) -> bool:
        return self._points_loaded

    @property
    def points(self) -> tuple[ClusterPoint, ...]:
        return tuple(self._points)

    @property
    def zoom(self) -> float | None:
        return self._zoom

    @property
    def rendered_ids(self) -> frozenset[str]:
        if self._reconciler is None:
            return frozenset()
        return self._reconciler.rendered_ids

    def visible_points(self) -> list[ClusterPoint]:
        min_zoom = self._settings.minVisibleZoom
        if min_zoom is not None and (self._zoom is None or self._zoom < min_zoom):
            return []
        return list(self._points)

    def map_ready(self, zoom: float) -> ReconcileStats:
        self._zoom = _check_zoom(zoom)
        if self._reconciler is None:
            self._reconciler = MarkerReconciler(
                self._sink,
                marker_id_for=self._marker_id_for,
                visual_for=self._visual_for,
            )
        return self._render()

    def set_points(self, points: Iterable[ClusterPoint]) -> ReconcileStats | None:
        self._points = list(points)
        self._points_loaded = True
        return self.render()

    def set_zoom(self, zoom: float) -> ReconcileStats | None:
        self._zoom = _check_zoom(zoom)
        return self.render()

    def upsert_point(self, point: ClusterPoint) -> ReconcileStats | None:
        """
        Replace the point with the same id (in place), or prepend a new one.
        """
        for i, p in enumerate(self._points):
            if p.id == point.id:
                self._points[i] = point
                break
        else:
            # Newly created pins go first, like the pin list itself.
            self._points.insert(0, point)
        self._points_loaded = True
        return self.render()

    def remove_point(self, point_id: str) -> ReconcileStats | None:
        self._points = [p for p in self._points if p.id != point_id]
        self._points_loaded = True
        return self.render()

    def render(self) -> ReconcileStats | None:
        """
        Re-cluster and reconcile; no-op (None) before `map_ready()` or after `teardown()`.
        """
        if self._reconciler is None:
            return None
        return self._render()

    def teardown(self) -> int:
        """
        Remove every marker this controller put on the map and forget the rendered ids.

        If the sink raises, the controller stays ready; call `teardown()` again to finish.
        """
        reconciler = self._reconciler
        if reconciler is None:
            return 0
        t0 = time.perf_counter()
        # A failed clear keeps the reconciler so a retry still knows what is on the map.
        removed = reconciler.clear()
        self._reconciler = None
        self.last_result = None
        self._record(
            kind="clear",
            n_points=0,
            n_clusters=0,
            stats={
                "markers": {"removed": removed},
                "timingsMs": {"total": (time.perf_counter() - t0) * 1000.0},
            },
        )
        return removed

    def _render(self) -> ReconcileStats:
        assert self._reconciler is not None and self._zoom is not None
        t0 = time.perf_counter()
        result = cluster_pins(
            self.visible_points(),
            zoom=self._zoom,
            base_radius=self._settings.baseRadiusPx,
        )
        t_cluster_ms = (time.perf_counter() - t0) * 1000.0

        t1 = time.perf_counter()
        stats = self._reconciler.reconcile(result.clusters)
        t_sync_ms = (time.perf_counter() - t1) * 1000.0

        self.last_result = result
        self._record(
            kind="reconcile",
            n_points=result.n_points,
            n_clusters=len(result.clusters),
            stats={
                "radiusPx": result.radius_px,
                "dropped": result.dropped,
                "markers": stats.as_dict(),
                "timingsMs": {
                    "cluster": t_cluster_ms,
                    "reconcile": t_sync_ms,
                    "total": t_cluster_ms + t_sync_ms,
                },
            },
        )
        return stats

    def _record(self, *, kind: str, n_points: int, n_clusters: int, stats: dict[str, Any]) -> None:
        if self._telemetry is None:
            return
        self._telemetry.record(
            kind=kind,
            view_zoom=self._zoom,
            n_points=n_points,
            n_clusters=n_clusters,
            stats=stats,
        )


def _check_zoom(zoom: float) -> float:
    z = float(zoom)
    if not math.isfinite(z):
        raise ValueError(f"zoom must be finite, got {zoom!r}")
    return z
