from __future__ import annotations

from clustering.engine import cluster_points
from clustering.types import Cluster, ClusterPoint
from markers.visuals import (
    PIN_COLOR,
    cluster_font_size_px,
    cluster_popup_html,
    cluster_size_px,
    make_visual_fn,
    pin_popup_html,
    visual_for,
)


def _group(n: int) -> Cluster:
    members = tuple(ClusterPoint(id=f"p{i}", lat=0.0, lng=0.0, payload=f"Place {i}") for i in range(n))
    return Cluster(id="p0", lat=0.0, lng=0.0, point_count=n, members=members, is_cluster=n > 1)


def test_cluster_size_tiers():
    assert [cluster_size_px(n) for n in (2, 9, 10, 99, 100, 5_000)] == [30, 30, 40, 40, 50, 50]
    assert [cluster_font_size_px(n) for n in (2, 10, 100)] == [12, 14, 16]


def test_pin_visual_is_a_small_red_dot():
    (c,) = cluster_points([ClusterPoint(id="a", lat=1.0, lng=1.0)], zoom=12, base_radius=50)
    v = visual_for(c)
    assert v.kind == "pin"
    assert v.size_px == 8
    assert v.color == PIN_COLOR
    assert v.text is None


def test_cluster_visual_shows_the_count():
    v = visual_for(_group(12))
    assert v.kind == "cluster"
    assert v.text == "12"
    assert v.size_px == 40
    assert v.font_size_px == 14


def test_cluster_popup_lists_first_names_and_the_rest():
    html = cluster_popup_html(_group(8), lambda p: p.payload)
    assert "8 Pins" in html
    assert "Place 0, Place 1, Place 2, Place 3, Place 4 and 3 more" in html
    assert "Place 5" not in html
    assert "Click to zoom in" in html


def test_cluster_popup_without_overflow():
    html = cluster_popup_html(_group(3), lambda p: p.payload)
    assert "Place 0, Place 1, Place 2</div>" in html
    assert "more" not in html


def test_popup_text_is_escaped():
    p = ClusterPoint(id="x", lat=0.0, lng=0.0, payload="<script>alert(1)</script>")
    html = pin_popup_html(p, lambda q: q.payload)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_visual_fn_honours_max_names():
    fn = make_visual_fn(lambda p: p.payload, max_names=2)
    v = fn(_group(4))
    assert "Place 0, Place 1 and 2 more" in v.popup_html


def test_visuals_compare_by_value():
    assert visual_for(_group(3)) == visual_for(_group(3))
    assert visual_for(_group(3)) != visual_for(_group(4))
