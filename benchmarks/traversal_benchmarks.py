"""Benchmark traversal operations over lists, dicts and jax arrays at fixed sizes."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable

import jax.numpy as jnp

import fnbelt
from _bench_utils import run_environment, summarize_ms, time_per_call_ms


PROFILE_CONFIG: dict[str, dict[str, int]] = {
    "quick": {"samples": 3, "warmup": 1, "repeats": 5},
    "full": {"samples": 7, "warmup": 2, "repeats": 20},
}


@dataclass(frozen=True)
class BenchCase:
    section: str
    name: str
    build: Callable[[int], Callable[[], object]]


@dataclass(frozen=True)
class BenchRow:
    section: str
    name: str
    n: int
    status: str
    mean_ms: float | None
    stdev_ms: float | None
    p50_ms: float | None
    p95_ms: float | None
    samples: int
    error: str | None

    @classmethod
    def timed(cls, case: BenchCase, n: int, per_call_ms: list[float]) -> BenchRow:
        stats = summarize_ms(per_call_ms)
        return cls(
            section=case.section,
            name=case.name,
            n=n,
            status="ok",
            samples=len(per_call_ms),
            error=None,
            **stats,
        )

    @classmethod
    def failed(cls, case: BenchCase, n: int, err: Exception) -> BenchRow:
        return cls(
            section=case.section,
            name=case.name,
            n=n,
            status="error",
            mean_ms=None,
            stdev_ms=None,
            p50_ms=None,
            p95_ms=None,
            samples=0,
            error=f"{type(err).__name__}: {err}",
        )


def _sizes_from_arg(raw: str) -> tuple[int, ...]:
    out = [int(part.strip()) for part in raw.split(",") if part.strip()]
    if not out:
        raise ValueError("at least one size must be provided")
    return tuple(out)


def _list_case(op: Callable[[list[int]], object]) -> Callable[[int], Callable[[], object]]:
    def build(n: int) -> Callable[[], object]:
        data = list(range(n))
        return lambda: op(data)

    return build


def _dict_case(op: Callable[[dict[str, int]], object]) -> Callable[[int], Callable[[], object]]:
    def build(n: int) -> Callable[[], object]:
        data = {f"k{i}": i for i in range(n)}
        return lambda: op(data)

    return build


def _array_case(op: Callable[[object], object]) -> Callable[[int], Callable[[], object]]:
    def build(n: int) -> Callable[[], object]:
        data = jnp.arange(n, dtype=jnp.float32) - n / 2
        return lambda: op(data)

    return build


def _memo_case(n: int) -> Callable[[], object]:
    memo = fnbelt.memoize(lambda values: sum(values))
    data = list(range(n))
    memo(data)
    return lambda: memo(data)


def _all_cases() -> list[BenchCase]:
    return [
        BenchCase("list", "each", _list_case(lambda xs: fnbelt.each(xs, lambda value, key: None))),
        BenchCase("list", "map", _list_case(lambda xs: fnbelt.map(xs, lambda value, key: value + 1))),
        BenchCase("list", "reduce", _list_case(lambda xs: fnbelt.reduce(xs, lambda memo, value: memo + value, 0))),
        BenchCase("list", "find_last", _list_case(lambda xs: fnbelt.find(xs, lambda value: value == len(xs) - 1))),
        BenchCase("list", "last_index_of", _list_case(lambda xs: fnbelt.last_index_of(xs, 0))),
        BenchCase("dict", "map", _dict_case(lambda d: fnbelt.map(d, lambda value, key: value * 2))),
        BenchCase("dict", "filter", _dict_case(lambda d: fnbelt.filter(d, lambda value: value % 2 == 0))),
        BenchCase("array", "max_fast_path", _array_case(lambda arr: fnbelt.max(arr))),
        BenchCase("array", "max_iterator", _array_case(lambda arr: fnbelt.max(arr, lambda value: value))),
        BenchCase("memo", "hit", _memo_case),
    ]


def _run_case(case: BenchCase, n: int, *, samples: int, warmup: int, repeats: int) -> BenchRow:
    try:
        per_call_ms = time_per_call_ms(case.build(n), repeats=repeats, samples=samples, warmup=warmup)
    except Exception as err:  # pragma: no cover - a failing case is reported, not fatal
        return BenchRow.failed(case, n, err)
    return BenchRow.timed(case, n, per_call_ms)


def _print_summary(rows: list[BenchRow]) -> None:
    print("traversal benchmark summary")
    print("section  case               n       mean(ms)   p95(ms)  status")
    print("-------  -----------------  ------  ---------  --------  ------")
    for row in rows:
        mean_text = "-" if row.mean_ms is None else f"{row.mean_ms:9.4f}"
        p95_text = "-" if row.p95_ms is None else f"{row.p95_ms:8.4f}"
        print(f"{row.section:7}  {row.name:17}  {row.n:6d}  {mean_text:>9}  {p95_text:>8}  {row.status}")
    print()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--profile", choices=sorted(PROFILE_CONFIG), default="quick", help="fixed benchmark profile presets")
    parser.add_argument("--ns", default="10,1000,10000", help="comma-separated n sizes")
    parser.add_argument("--sections", default="list,dict,array,memo", help="comma-separated subset of sections")
    parser.add_argument("--json-out", default="", help="optional path for machine-readable output")
    args = parser.parse_args()

    config = PROFILE_CONFIG[args.profile]
    sizes = _sizes_from_arg(args.ns)
    sections = {part.strip() for part in args.sections.split(",") if part.strip()}
    cases = [case for case in _all_cases() if case.section in sections]

    rows = [
        _run_case(case, n, samples=config["samples"], warmup=config["warmup"], repeats=config["repeats"])
        for n in sizes
        for case in cases
    ]
    _print_summary(rows)

    if args.json_out:
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "generated_at": datetime.now(UTC).isoformat(),
            "profile": args.profile,
            "environment": run_environment(),
            "rows": [asdict(row) for row in rows],
        }
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"wrote {out}")


if __name__ == "__main__":
    main()
