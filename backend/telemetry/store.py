from __future__ import annotations

import json
import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import duckdb

from telemetry.sql import (
    CREATE_EVENTS_TABLE_SQL,
    INSERT_EVENTS_SQL,
    SLOWEST_SQL_TEMPLATE,
    SUMMARY_SQL_TEMPLATE,
)


def _safe_float(v) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


def _safe_int(v) -> int:
    try:
        return int(v or 0)
    except (TypeError, ValueError):
        return 0


@dataclass
class TelemetryStore:
    """
    Append-only DuckDB log of marker render passes.

    Writes go through a queue drained by one background thread, so `record()` never blocks
    a render pass.
    """

    path: Path
    conn: duckdb.DuckDBPyConnection
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _q: "queue.Queue[dict[str, Any]]" = field(default_factory=queue.Queue, repr=False)
    _stop: threading.Event = field(default_factory=threading.Event, repr=False)
    _worker: threading.Thread | None = field(default=None, repr=False)

    def ensure_schema(self) -> None:
        with self._lock:
            self.conn.execute(CREATE_EVENTS_TABLE_SQL)

    def start(self) -> None:
        if self._worker is not None:
            return
        self._stop.clear()
        self._worker = threading.Thread(
            target=self._run, name="telemetry-writer", daemon=True
        )
        self._worker.start()

    def stop(self, *, timeout_s: float = 2.0) -> None:
        """
        Stop the writer thread (best-effort); queued events are flushed on the way out.
        """
        self._stop.set()
        w = self._worker
        if w is not None and w.is_alive():
            w.join(timeout=timeout_s)
        self._worker = None

    def record(
        self,
        *,
        kind: str,
        view_zoom: float | None,
        n_points: int,
        n_clusters: int,
        stats: dict[str, Any],
    ) -> None:
        # Best-effort, non-blocking: enqueue and return.
        self.start()
        try:
            self._q.put_nowait(
                {
                    "ts_ms": int(time.time() * 1000),
                    "kind": str(kind),
                    "view_zoom": _safe_float(view_zoom),
                    "n_points": int(n_points),
                    "n_clusters": int(n_clusters),
                    "stats_json": json.dumps(stats, ensure_ascii=False, default=str),
                }
            )
        except queue.Full:
            # drop telemetry on overload
            pass

    def flush(self, *, timeout_s: float = 2.0) -> None:
        """
        Wait (up to `timeout_s`) until every queued event has been written.
        """
        if self._worker is None:
            return
        deadline = time.monotonic() + timeout_s
        while self._q.unfinished_tasks and time.monotonic() < deadline:
            time.sleep(0.01)

    def query(self, sql: str, params: list[Any] | None = None) -> list[tuple]:
        """
        Run a read query on the store's own connection.

        DuckDB holds a file lock while the writer is alive, so readers in the same process
        should come through here.
        """
        with self._lock:
            if params:
                return self.conn.execute(sql, params).fetchall()
            return self.conn.execute(sql).fetchall()

    def summary(
        self,
        *,
        kind: str | None = None,
        since_ms: int | None = None,
    ) -> list[dict[str, Any]]:
        where = []
        params: list[Any] = []
        if kind:
            where.append("kind = ?")
            params.append(kind)
        if since_ms is not None:
            where.append("ts_ms >= ?")
            params.append(int(since_ms))

        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        rows = self.query(
            SUMMARY_SQL_TEMPLATE.format(where_sql=where_sql),
            params,
        )

        out: list[dict[str, Any]] = []
        for kind_v, n, avg_ms, p50, p95, avg_points, added, removed, dropped in rows:
            out.append(
                {
                    "kind": kind_v,
                    "n": int(n),
                    "avgTotalMs": _safe_float(avg_ms),
                    "p50TotalMs": _safe_float(p50),
                    "p95TotalMs": _safe_float(p95),
                    "avgPoints": _safe_float(avg_points),
                    "markersAdded": _safe_int(added),
                    "markersRemoved": _safe_int(removed),
                    "pointsDropped": _safe_int(dropped),
                }
            )
        return out

    def slowest(self, *, kind: str | None = None, limit: int = 25) -> list[dict[str, Any]]:
        where = ["json_extract(stats_json, '$.timingsMs.total') IS NOT NULL"]
        params: list[Any] = []
        if kind:
            where.append("kind = ?")
            params.append(kind)
        params.append(int(max(1, min(200, limit))))

        rows = self.query(
            SLOWEST_SQL_TEMPLATE.format(where_sql=" AND ".join(where)),
            params,
        )
        out: list[dict[str, Any]] = []
        for ts_ms, kind_v, total_ms, n_points, n_clusters, view_zoom in rows:
            out.append(
                {
                    "tsMs": int(ts_ms),
                    "kind": kind_v,
                    "totalMs": _safe_float(total_ms),
                    "nPoints": _safe_int(n_points),
                    "nClusters": _safe_int(n_clusters),
                    "viewZoom": _safe_float(view_zoom),
                }
            )
        return out

    def reset(self) -> None:
        # Stop the writer first so it can't write to a closed connection.
        self.stop(timeout_s=2.0)
        with self._lock:
            try:
                self.conn.close()
            except duckdb.Error:
                pass
            self.path.unlink(missing_ok=True)

    def _write(self, batch: list[dict[str, Any]]) -> None:
        try:
            with self._lock:
                self.conn.executemany(
                    INSERT_EVENTS_SQL,
                    [
                        (
                            e["ts_ms"],
                            e["kind"],
                            e["view_zoom"],
                            e["n_points"],
                            e["n_clusters"],
                            e["stats_json"],
                        )
                        for e in batch
                    ],
                )
                # Readers on other connections only see checkpointed rows.
                try:
                    self.conn.execute("CHECKPOINT;")
                except duckdb.Error:
                    pass
        finally:
            # Events count as done once written, so flush() returns only after the insert.
            for _ in batch:
                self._q.task_done()

    def _run(self) -> None:
        self.ensure_schema()
        batch: list[dict[str, Any]] = []
        while not self._stop.is_set():
            try:
                batch.append(self._q.get(timeout=0.1))
            except queue.Empty:
                pass
            # Write once the queue runs dry or the batch is full.
            if batch and (len(batch) >= 250 or self._q.empty()):
                self._write(batch)
                batch = []

        while True:
            try:
                batch.append(self._q.get_nowait())
            except queue.Empty:
                break
        if batch:
            self._write(batch)
