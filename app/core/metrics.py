"""In-process latency and failure counters for api.php calls."""
import time
from contextlib import contextmanager
from collections import defaultdict
from typing import Dict, List

_latencies: Dict[str, List[float]] = defaultdict(list)
_failures: Dict[str, int] = defaultdict(int)


@contextmanager
def record_latency(operation: str):
    """Time one call; an exception escaping the block counts as a failure."""
    start = time.perf_counter()
    try:
        yield
    except BaseException:
        _failures[operation] += 1
        raise
    finally:
        _latencies[operation].append((time.perf_counter() - start) * 1000.0)


def get_metrics_snapshot() -> Dict[str, dict]:
    snapshot = {}
    for operation, samples in _latencies.items():
        ordered = sorted(samples)
        snapshot[operation] = {
            "calls": len(ordered),
            "failures": _failures.get(operation, 0),
            "avg_ms": round(sum(ordered) / len(ordered), 2) if ordered else 0.0,
            "max_ms": round(ordered[-1], 2) if ordered else 0.0,
        }
    return snapshot


def reset_metrics() -> None:
    _latencies.clear()
    _failures.clear()
