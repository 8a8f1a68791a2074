from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from clustering.types import Cluster
from markers.ids import MarkerIdFn, marker_id_for
from markers.types import MarkerCoords, MarkerSink, MarkerSpec
from markers.visuals import make_visual_fn


@dataclass(frozen=True)
class ReconcileStats:
    # `added` includes re-adds of replaced markers.
    added: int = 0
    removed: int = 0
    replaced: int = 0
    unchanged: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "added": self.added,
            "removed": self.removed,
            "replaced": self.replaced,
            "unchanged": self.unchanged,
        }


class MarkerReconciler:
    """
    Keeps a map's marker layer in sync with the latest clustering result.

    The reconciler owns the set of rendered marker ids (plus the coords/visual each was
    added with). Lifetime: create on map-ready, drop (after `clear()`) on unmount.

    Per pass:
    1. every rendered id missing from the new result gets exactly one `remove_marker`
    2. new ids get `add_marker`; ids rendered with identical coords + visual are left alone;
       ids whose coords or visual changed get `remove_marker` then `add_marker`

    So an id never receives two adds without a remove in between, and a second pass with
    the same clusters makes no sink calls at all.

    Failure handling: sink exceptions propagate. The rendered state is updated after each
    successful sink call, so after a failure it mirrors what the sink actually accepted and
    the next pass converges from there.
    """

    def __init__(
        self,
        sink: MarkerSink,
        *,
        marker_id_for: MarkerIdFn = marker_id_for,
        visual_for: Callable[[Cluster], Any] | None = None,
    ) -> None:
        self._sink = sink
        self._marker_id_for = marker_id_for
        self._visual_for = visual_for or make_visual_fn()
        # marker_id -> (coords, visual); insertion order == render order.
        self._rendered: dict[str, tuple[MarkerCoords, Any]] = {}

    @property
    def rendered_ids(self) -> frozenset[str]:
        return frozenset(self._rendered)

    def __len__(self) -> int:
        return len(self._rendered)

    def specs_for(self, clusters: Iterable[Cluster]) -> list[MarkerSpec]:
        """
        Marker specs for a cluster list. On id collisions the first cluster wins.
        """
        out: list[MarkerSpec] = []
        seen: set[str] = set()
        for c in clusters:
            mid = self._marker_id_for(c)
            if mid in seen:
                continue
            seen.add(mid)
            out.append(
                MarkerSpec(
                    marker_id=mid,
                    coords=MarkerCoords(lat=c.lat, lng=c.lng),
                    visual=self._visual_for(c),
                    cluster=c,
                )
            )
        return out

    def reconcile(self, clusters: Iterable[Cluster]) -> ReconcileStats:
        specs = self.specs_for(clusters)
        new_ids = {s.marker_id for s in specs}

        removed = 0
        for mid in [m for m in self._rendered if m not in new_ids]:
            self._sink.remove_marker(mid)
            del self._rendered[mid]
            removed += 1

        added = replaced = unchanged = 0
        for spec in specs:
            prev = self._rendered.get(spec.marker_id)
            if prev is not None:
                if prev == (spec.coords, spec.visual):
                    unchanged += 1
                    continue
                self._sink.remove_marker(spec.marker_id)
                del self._rendered[spec.marker_id]
                replaced += 1
            self._sink.add_marker(spec.marker_id, spec.coords, spec.visual)
            self._rendered[spec.marker_id] = (spec.coords, spec.visual)
            added += 1

        return ReconcileStats(added=added, removed=removed, replaced=replaced, unchanged=unchanged)

    def clear(self) -> int:
        """
        Remove every rendered marker. Returns how many were removed.
        """
        n = 0
        for mid in list(self._rendered):
            self._sink.remove_marker(mid)
            del self._rendered[mid]
            n += 1
        return n
