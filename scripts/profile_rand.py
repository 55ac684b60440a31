#!/usr/bin/env python3
"""Profile generator performance using draw workloads.

Usage (from the repo root):
    python scripts/profile_rand.py profile                      # cProfile top 30 functions
    python scripts/profile_rand.py profile --workload normal
    python scripts/profile_rand.py compare-time                 # RngSource vs LockedSource timing
    python scripts/profile_rand.py compare-time --draws 1000000
    python scripts/profile_rand.py dump-json                    # print reference scenarios as JSON
    python scripts/profile_rand.py dump-json --scenario seed1_int64
"""

import argparse
import cProfile
import json
import pstats
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

# Add repo root to path so we can import tapgen and tapgen_cmp
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from tapgen.rand import Rand  # noqa: E402
from tapgen.source import LockedSource, RngSource  # noqa: E402
from tapgen_cmp.compare import TEST_SCENARIOS  # noqa: E402


@dataclass
class Workload:
    name: str
    run: Callable[[Rand, int], None]


def _ints(r: Rand, n: int) -> None:
    for _ in range(n):
        r.int64()


def _bounded(r: Rand, n: int) -> None:
    for _ in range(n):
        r.int32n(1000003)


def _floats(r: Rand, n: int) -> None:
    for _ in range(n):
        r.float64()


def _shuffle(r: Rand, n: int) -> None:
    r.shuffle(list(range(n)))


def _normal(r: Rand, n: int) -> None:
    normal = r.new_normal()
    for _ in range(n):
        normal.draw()


def _zipf(r: Rand, n: int) -> None:
    z = r.new_zipf(1.2, 10000)
    for _ in range(n):
        z.draw()


WORKLOADS = [
    Workload("int64", _ints),
    Workload("int32n", _bounded),
    Workload("float64", _floats),
    Workload("shuffle", _shuffle),
    Workload("normal", _normal),
    Workload("zipf", _zipf),
]


def _select_workloads(args):
    """Filter workloads based on CLI args."""
    workloads = list(WORKLOADS)
    if args.workload:
        workloads = [w for w in workloads if w.name == args.workload]
        if not workloads:
            names = [w.name for w in WORKLOADS]
            print(f"Unknown workload: {args.workload}")
            print(f"Available: {', '.join(names)}")
            sys.exit(1)
    return workloads


def cmd_profile(args):
    """Run cProfile over the selected workloads."""
    workloads = _select_workloads(args)
    top_n = args.top or 30
    draws = args.draws or 200_000

    profiler = cProfile.Profile()
    for workload in workloads:
        r = Rand(RngSource(1))
        print(f"Profiling: {workload.name} ({draws} draws)...")
        profiler.enable()
        workload.run(r, draws)
        profiler.disable()

    print(f"\n{'=' * 70}")
    print(f"Top {top_n} functions by cumulative time")
    print(f"Workloads: {', '.join(w.name for w in workloads)}")
    print(f"{'=' * 70}\n")

    stats = pstats.Stats(profiler)
    stats.sort_stats("cumulative")
    stats.print_stats(top_n)

    if args.output:
        profiler.dump_stats(args.output)
        print(f"\nProfile data written to {args.output}")
        print("Visualize with: snakeviz " + args.output)


def cmd_compare_time(args):
    """Time unsynchronized vs locked sources on each workload."""
    workloads = _select_workloads(args)
    iterations = args.iterations or 3
    draws = args.draws or 100_000

    print(
        f"{'Workload':<20} {'Rng (ms)':>12} {'Locked (ms)':>12} {'Overhead':>10}"
    )
    print("-" * 57)

    for workload in workloads:
        rng_times = []
        locked_times = []
        for _ in range(iterations):
            r = Rand(RngSource(1))
            start = time.perf_counter()
            workload.run(r, draws)
            rng_times.append((time.perf_counter() - start) * 1000)

            r = Rand(LockedSource(seed=1))
            start = time.perf_counter()
            workload.run(r, draws)
            locked_times.append((time.perf_counter() - start) * 1000)
        rng_median = statistics.median(rng_times)
        locked_median = statistics.median(locked_times)
        overhead = locked_median / rng_median if rng_median > 0 else 0.0
        print(
            f"{workload.name:<20} {rng_median:>12.1f} {locked_median:>12.1f} {overhead:>9.2f}x"
        )

    print(f"\n({iterations} iterations of {draws} draws each, median reported)")


def cmd_dump_json(args):
    """Print reference scenarios as JSON."""
    scenarios = list(TEST_SCENARIOS)
    if args.scenario:
        scenarios = [s for s in scenarios if s.name == args.scenario]
        if not scenarios:
            print(f"Unknown scenario: {args.scenario}")
            sys.exit(1)
    for scenario in scenarios:
        args_list = [
            list(a) if isinstance(a, range) else a for a in scenario.args
        ]
        print(f"// Scenario: {scenario.name}")
        print(
            json.dumps(
                {
                    "seed": scenario.seed,
                    "op": scenario.op,
                    "args": args_list,
                    "expected": scenario.expected,
                },
                indent=2,
            )
        )
        print()


def main():
    parser = argparse.ArgumentParser(
        description="Profile tap generator performance"
    )
    sub = parser.add_subparsers(dest="command")

    # Common args added to each workload subparser
    def add_common(p):
        p.add_argument("--workload", help="Run only this workload (by name)")
        p.add_argument("--draws", type=int, help="Draws per workload run")

    p_profile = sub.add_parser("profile", help="cProfile the draw paths")
    add_common(p_profile)
    p_profile.add_argument(
        "--top", type=int, help="Number of top functions to show (default: 30)"
    )
    p_profile.add_argument(
        "--output", "-o", help="Write cProfile binary data to file"
    )

    p_time = sub.add_parser(
        "compare-time", help="Time RngSource vs LockedSource"
    )
    add_common(p_time)
    p_time.add_argument(
        "--iterations",
        type=int,
        help="Iterations per workload (default: 3)",
    )

    p_dump = sub.add_parser(
        "dump-json", help="Print reference scenarios as JSON"
    )
    p_dump.add_argument("--scenario", help="Only this scenario (by name)")

    args = parser.parse_args()

    if args.command == "profile":
        cmd_profile(args)
    elif args.command == "compare-time":
        cmd_compare_time(args)
    elif args.command == "dump-json":
        cmd_dump_json(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
