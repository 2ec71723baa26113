"""Benchmark slot-chain evaluation and cycle detection."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

from realtree import Session, SlotId, parse_expression, parse_line
from _bench_utils import host_metadata, mean as _mean, percentile as _percentile, sample_ms, stddev as _stddev

PROFILE_CONFIG: dict[str, dict[str, int]] = {
    "quick": {"samples": 3, "warmup": 1, "repeats": 20},
    "full": {"samples": 7, "warmup": 2, "repeats": 200},
}


@dataclass(frozen=True)
class BenchCase:
    name: str
    assignments: tuple[str, ...]
    target: str
    note: str


@dataclass(frozen=True)
class BenchRow:
    name: str
    note: str
    outcome: str
    mean_ms: float
    stdev_ms: float
    p50_ms: float
    p95_ms: float
    repeats: int
    samples: int


def _chain_assignments(length: int) -> tuple[str, ...]:
    # z = 1, y = z + 1, ... each slot refers to the next one.
    names = [SlotId(25 - i).name for i in range(length)]
    lines = [f"{names[0]} = 1"]
    for prev, name in zip(names, names[1:]):
        lines.append(f"{name} = {prev} + 1")
    return tuple(lines)


def _cases() -> list[BenchCase]:
    chain = _chain_assignments(26)
    return [
        BenchCase(
            name="literal_expression",
            assignments=(),
            target="1 + 2 * 3 - 4 / 5 % 6",
            note="no slot references",
        ),
        BenchCase(
            name="chain_26",
            assignments=chain,
            target="a",
            note="every slot refers to the next one",
        ),
        BenchCase(
            name="fan_out",
            assignments=("a = 2", "b = a * a + a", "c = b * b + b", "d = c * c + c"),
            target="d",
            note="repeated acyclic references to the same slots",
        ),
        BenchCase(
            name="cycle_26",
            assignments=chain[1:] + ("z = a",),
            target="a",
            note="26-slot cycle, detected on re-entry",
        ),
    ]


def _run_case(case: BenchCase, *, repeats: int, warmup: int, samples: int) -> BenchRow:
    session = Session()
    for line in case.assignments:
        for command in parse_line(line):
            session.execute(command)

    tree = parse_expression(case.target)
    outcome = session.evaluate_and_display(tree)
    ms = sample_ms(lambda: session.evaluate_and_display(tree), repeats=repeats, warmup=warmup, samples=samples)
    return BenchRow(
        name=case.name,
        note=case.note,
        outcome=outcome.display(),
        mean_ms=_mean(ms),
        stdev_ms=_stddev(ms),
        p50_ms=_percentile(ms, 0.50),
        p95_ms=_percentile(ms, 0.95),
        repeats=repeats,
        samples=samples,
    )


def _build_markdown(rows: list[BenchRow]) -> str:
    lines = [
        "# Slot-chain evaluation benchmarks",
        "",
        "| Case | Outcome | Mean ms | Stdev ms | p50 ms | p95 ms | Note |",
        "|---|---|---:|---:|---:|---:|---|",
    ]
    for row in rows:
        lines.append(
            f"| `{row.name}` | {row.outcome} | {row.mean_ms:.4f} | {row.stdev_ms:.4f} | {row.p50_ms:.4f} | {row.p95_ms:.4f} | {row.note} |"
        )
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--profile", choices=sorted(PROFILE_CONFIG), default="quick")
    parser.add_argument(
        "--json-out",
        default="benchmarks/output/chain_benchmarks.json",
        help="where to write machine-readable results",
    )
    args = parser.parse_args()

    config = PROFILE_CONFIG[args.profile]
    rows = [
        _run_case(case, repeats=config["repeats"], warmup=config["warmup"], samples=config["samples"])
        for case in _cases()
    ]
    print(_build_markdown(rows))

    out_path = Path(args.json_out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "profile": args.profile,
        "host": host_metadata(),
        "rows": [asdict(row) for row in rows],
    }
    out_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"\nWrote JSON: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
