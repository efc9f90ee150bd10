"""Timing and environment capture shared by the traversal benchmarks."""

from __future__ import annotations

import os
import platform
import statistics
import time
from importlib import metadata
from typing import Callable

import jax


def run_environment() -> dict[str, object]:
    """Interpreter, jax backend and fnbelt flags the numbers were taken under."""
    devices = jax.devices()
    return {
        "python": platform.python_version(),
        "machine": platform.machine(),
        "fnbelt": metadata.version("fnbelt"),
        "jax": metadata.version("jax"),
        "backend": jax.default_backend(),
        "device_count": len(devices),
        "array_fast_path": os.environ.get("FNBELT_DISABLE_ARRAY_FAST_PATH", "0") != "1",
        "memo_key_digest": os.environ.get("FNBELT_MEMO_KEY_DIGEST", "sha256"),
    }


def _settle(result: object) -> None:
    # Traversals may hand back arrays nested in lists or dicts.
    if hasattr(result, "block_until_ready"):
        result.block_until_ready()
    elif isinstance(result, dict):
        for item in result.values():
            _settle(item)
    elif isinstance(result, (list, tuple)):
        for item in result:
            _settle(item)


def time_per_call_ms(fn: Callable[[], object], *, repeats: int, samples: int, warmup: int) -> list[float]:
    """Per-call wall time in milliseconds, one entry per sample."""
    for _ in range(warmup):
        _settle(fn())

    per_call: list[float] = []
    for _ in range(samples):
        start_ns = time.perf_counter_ns()
        for _ in range(repeats):
            _settle(fn())
        per_call.append((time.perf_counter_ns() - start_ns) / repeats / 1e6)
    return per_call


def summarize_ms(per_call: list[float]) -> dict[str, float]:
    """Mean, sample stdev, median and p95 of a timing run."""
    if len(per_call) < 2:
        only = per_call[0]
        return {"mean_ms": only, "stdev_ms": 0.0, "p50_ms": only, "p95_ms": only}
    cuts = statistics.quantiles(per_call, n=20, method="inclusive")
    return {
        "mean_ms": statistics.fmean(per_call),
        "stdev_ms": statistics.stdev(per_call),
        "p50_ms": statistics.median(per_call),
        "p95_ms": cuts[-1],
    }
