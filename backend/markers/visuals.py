from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Literal

from clustering.types import Cluster, ClusterPoint


MarkerKind = Literal["pin", "cluster"]
LabelFn = Callable[[ClusterPoint], str]
VisualFn = Callable[[Cluster], "MarkerVisual"]

PIN_COLOR = "#EF4444"
PIN_SIZE_PX = 8
DEFAULT_POPUP_MAX_NAMES = 5
ZOOM_HINT = "Click to zoom in and see individual pins"


@dataclass(frozen=True)
class MarkerVisual:
    kind: MarkerKind
    size_px: int
    font_size_px: int | None
    text: str | None
    color: str
    popup_html: str


def default_label(_point: ClusterPoint) -> str:
    return "Pin"


def cluster_size_px(point_count: int) -> int:
    if point_count < 10:
        return 30
    if point_count < 100:
        return 40
    return 50


def cluster_font_size_px(point_count: int) -> int:
    if point_count < 10:
        return 12
    if point_count < 100:
        return 14
    return 16


def pin_popup_html(point: ClusterPoint, label_for: LabelFn = default_label) -> str:
    return f'<div class="pin-popup"><div class="pin-popup-title">{html.escape(label_for(point))}</div></div>'


def cluster_popup_html(
    cluster: Cluster,
    label_for: LabelFn = default_label,
    *,
    max_names: int = DEFAULT_POPUP_MAX_NAMES,
) -> str:
    names = ", ".join(html.escape(label_for(p)) for p in cluster.members[:max_names])
    more = cluster.point_count - max_names
    more_text = f" and {more} more" if more > 0 else ""
    return (
        '<div class="pin-popup">'
        f'<div class="pin-popup-title">{cluster.point_count} Pins</div>'
        f'<div class="pin-popup-names">{names}{more_text}</div>'
        f'<div class="pin-popup-hint">{ZOOM_HINT}</div>'
        "</div>"
    )


def visual_for(
    cluster: Cluster,
    label_for: LabelFn = default_label,
    *,
    max_names: int = DEFAULT_POPUP_MAX_NAMES,
) -> MarkerVisual:
    if cluster.is_cluster:
        return MarkerVisual(
            kind="cluster",
            size_px=cluster_size_px(cluster.point_count),
            font_size_px=cluster_font_size_px(cluster.point_count),
            text=str(cluster.point_count),
            color=PIN_COLOR,
            popup_html=cluster_popup_html(cluster, label_for, max_names=max_names),
        )
    return MarkerVisual(
        kind="pin",
        size_px=PIN_SIZE_PX,
        font_size_px=None,
        text=None,
        color=PIN_COLOR,
        popup_html=pin_popup_html(cluster.seed, label_for),
    )


def make_visual_fn(label_for: LabelFn | None = None, *, max_names: int = DEFAULT_POPUP_MAX_NAMES) -> VisualFn:
    lf = label_for or default_label

    def _fn(cluster: Cluster) -> MarkerVisual:
        return visual_for(cluster, lf, max_names=max_names)

    return _fn
