"""
Operation counters backed by Redis.

One INCR counter per (operation, outcome); outcome is "ok" or the error kind
("NotOwner", "InvalidTransition", ...). get_metrics_snapshot() feeds
/admin/metrics. Counters are best-effort: a Redis hiccup here must never turn a
committed transition into a failed response.
"""
from __future__ import annotations
import time
from typing import Dict
from crossbridge.store.redis_conn import get_redis
from crossbridge.observability.logging import log

K_PREFIX = "metrics:ops:"

OPERATIONS = ("construct", "create_request", "mark_doing", "mark_done", "mark_error")


def _key(op: str, outcome: str) -> str:
    return f"{K_PREFIX}{op}:{outcome}"


def record_outcome(op: str, outcome: str = "ok") -> None:
    try:
        r = get_redis()
        r.incr(_key(op, outcome), 1)
    except Exception as e:
        log(event="metrics_write_failed", op=op, outcome=outcome, error_type=type(e).__name__)


def get_metrics_snapshot() -> dict:
    r = get_redis()
    ops: Dict[str, Dict[str, int]] = {}
    for op in OPERATIONS:
        counts: Dict[str, int] = {}
        for key in r.scan_iter(match=f"{K_PREFIX}{op}:*"):
            key = key.decode("utf-8") if isinstance(key, (bytes, bytearray)) else str(key)
            outcome = key[len(f"{K_PREFIX}{op}:"):]
            counts[outcome] = int(r.get(key) or 0)
        total = sum(counts.values())
        ok = counts.get("ok", 0)
        ops[op] = {
            "total": total,
            "ok": ok,
            "rejected": total - ok,
            "by_outcome": counts,
        }
    return {"operations": ops, "snapshot_at": int(time.time())}
