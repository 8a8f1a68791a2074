from __future__ import annotations

CREATE_EVENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS events (
  ts_ms BIGINT,
  kind TEXT,
  view_zoom DOUBLE,
  n_points INTEGER,
  n_clusters INTEGER,
  stats_json TEXT
);
"""

SUMMARY_SQL_TEMPLATE = """
SELECT
  kind,
  COUNT(*) AS n,
  AVG(try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE)) AS avg_total_ms,
  quantile_cont(try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE), 0.50) AS p50_total_ms,
  quantile_cont(try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE), 0.95) AS p95_total_ms,
  AVG(n_points) AS avg_points,
  SUM(try_cast(json_extract(stats_json, '$.markers.added') AS BIGINT)) AS total_added,
  SUM(try_cast(json_extract(stats_json, '$.markers.removed') AS BIGINT)) AS total_removed,
  SUM(try_cast(json_extract(stats_json, '$.dropped') AS BIGINT)) AS total_dropped
FROM events
{where_sql}
GROUP BY kind
ORDER BY kind
"""

SLOWEST_SQL_TEMPLATE = """
SELECT
  ts_ms,
  kind,
  try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE) AS total_ms,
  n_points,
  n_clusters,
  view_zoom
FROM events
WHERE {where_sql}
ORDER BY total_ms DESC
LIMIT ?
"""

INSERT_EVENTS_SQL = """
INSERT INTO events
  (ts_ms, kind, view_zoom, n_points, n_clusters, stats_json)
VALUES (?, ?, ?, ?, ?, ?)
"""
