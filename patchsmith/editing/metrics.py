"""
Patch metrics — one JSON line per tool run in
``<project>/.patchsmith/edit_metrics.jsonl``, plus rolling statistics over
the most recent runs (``patchsmith stats``).
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from datetime import datetime, timezone
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_METRICS_DIR = ".patchsmith"
_METRICS_FILE = "edit_metrics.jsonl"


def _metrics_path(project_root: str | None, metrics_dir: str) -> str:
    return os.path.join(project_root or os.getcwd(), metrics_dir, _METRICS_FILE)


def log_patch_metric(
    data: dict,
    project_root: str | None = None,
    metrics_dir: str = DEFAULT_METRICS_DIR,
) -> None:
    """Append *data* (tool, file, success, hunk counts, ...) with a UTC timestamp.

    Failing to record a metric never fails the operation being measured.
    """
    path = _metrics_path(project_root, metrics_dir)
    record = {"timestamp": datetime.now(timezone.utc).isoformat(), **data}
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a", encoding="utf-8") as out:
            out.write(json.dumps(record) + "\n")
    except OSError as exc:
        logger.warning("[Metrics] Could not record to %s: %s", path, exc)


def _iter_records(path: str) -> Iterator[dict]:
    """Yield the parseable records of the log; corrupt lines are skipped."""
    if not os.path.isfile(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as src:
            for raw in src:
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    yield json.loads(raw)
                except json.JSONDecodeError:
                    logger.debug("[Metrics] Skipping corrupt line in %s", path)
    except OSError as exc:
        logger.warning("[Metrics] Could not read %s: %s", path, exc)


def read_patch_stats(
    last_n: int = 50,
    project_root: str | None = None,
    metrics_dir: str = DEFAULT_METRICS_DIR,
) -> dict:
    """Summarize the last *last_n* records.

    Rates are percentages: ``success_rate`` over all records,
    ``partial_rate`` for runs with both applied and failed hunks, and
    ``fuzzy_rate`` for runs where a hunk landed away from its header line.
    """
    records = list(_iter_records(_metrics_path(project_root, metrics_dir)))
    records = records[-last_n:] if last_n > 0 else []
    count = len(records)

    def rate(predicate) -> float:
        if not count:
            return 0.0
        return sum(1 for r in records if predicate(r)) / count * 100

    tools = Counter(r.get("tool", "unknown") for r in records)
    return {
        "total_edits": count,
        "success_rate": rate(lambda r: r.get("success", False)),
        "partial_rate": rate(
            lambda r: r.get("hunks_applied", 0) > 0 and r.get("hunks_failed", 0) > 0
        ),
        "fuzzy_rate": rate(lambda r: r.get("fuzzy_used", False)),
        "hunks_applied": sum(r.get("hunks_applied", 0) for r in records),
        "hunks_failed": sum(r.get("hunks_failed", 0) for r in records),
        "tools": dict(tools.most_common()),
    }
