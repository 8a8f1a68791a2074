from __future__ import annotations

from clustering.engine import cluster_points
from clustering.geojson import abbreviate_count, cluster_color, cluster_circle_radius, clusters_to_geojson
from clustering.types import ClusterPoint


def _abc() -> list[ClusterPoint]:
    return [
        ClusterPoint(id="A", lat=44.970, lng=-93.270),
        ClusterPoint(id="B", lat=44.971, lng=-93.271),
        ClusterPoint(id="C", lat=40.000, lng=-100.000),
    ]


def test_feature_collection_uses_lng_lat_order():
    fc = clusters_to_geojson(cluster_points(_abc(), zoom=3, base_radius=50))
    assert fc["type"] == "FeatureCollection"
    assert len(fc["features"]) == 2

    group, single = fc["features"]
    assert group["properties"]["cluster"] is True
    assert group["properties"]["cluster_id"] == "A"
    assert group["properties"]["point_count"] == 2
    assert group["properties"]["point_count_abbreviated"] == "2"

    assert single["properties"] == {"cluster": False, "id": "C"}
    assert single["geometry"] == {"type": "Point", "coordinates": [-100.0, 40.0]}


def test_abbreviated_counts():
    assert abbreviate_count(999) == "999"
    assert abbreviate_count(1_000) == "1k"
    assert abbreviate_count(1_234) == "1.2k"
    assert abbreviate_count(12_345) == "12k"
    # Halves round up.
    assert abbreviate_count(1_250) == "1.3k"
    assert abbreviate_count(10_500) == "11k"


def test_step_styling():
    assert [cluster_color(n) for n in (2, 10, 29, 30)] == ["#51bbd6", "#f1f075", "#f1f075", "#f28cb1"]
    assert [cluster_circle_radius(n) for n in (2, 10, 30)] == [20, 30, 40]


def test_empty_collection():
    assert clusters_to_geojson([]) == {"type": "FeatureCollection", "features": []}
