#!/usr/bin/env python3
"""Regenerate the cooked table in ``tapgen/cooked.py``.

The cooked table is the feedback register after 7.8e12 steps from seed 1,
where the register was seeded with a lighter bootstrap than the one
``RngSource`` uses (words built from shifts of 20 and 10 bits rather than
40 and 20, and no cooked XOR). At full length this takes days in pure
Python; use ``--steps`` for a shorter run when checking the procedure.

Usage (from the repo root):
    python scripts/gen_cooked.py --steps 1000000          # quick run
    python scripts/gen_cooked.py --check                  # full run, compare
    python scripts/gen_cooked.py --steps 1000 --mask63    # low 63 bits only
"""

import argparse
import sys
import time
from pathlib import Path

# Add repo root to path so we can import tapgen
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tapgen.cooked import RNG_COOKED  # noqa: E402
from tapgen.source import (  # noqa: E402
    INT32_MAX,
    MASK63,
    RNG_LEN,
    RngSource,
    _seedrand,
    to_int64,
)

FULL_STEPS = 7_800_000_000_000


def cooking_bootstrap(seed: int) -> list[int]:
    """Initial register used for cooking (no cooked XOR)."""
    seed %= INT32_MAX
    if seed == 0:
        seed = 89482311
    vec = [0] * RNG_LEN
    x = seed
    for i in range(-20, RNG_LEN):
        x = _seedrand(x)
        if i >= 0:
            u = x << 20
            x = _seedrand(x)
            u ^= x << 10
            x = _seedrand(x)
            u ^= x
            vec[i] = u
    return vec


def cook(steps: int, report_every: int = 0) -> list[int]:
    """Run the generator ``steps`` times from the cooking bootstrap."""
    src = RngSource.from_state(cooking_bootstrap(1))
    t0 = time.perf_counter()
    for i in range(steps):
        src.next64()
        if report_every and i and i % report_every == 0:
            elapsed = time.perf_counter() - t0
            print(
                f"  {i:,} steps ({elapsed:.0f}s)", file=sys.stderr, flush=True
            )
    _, _, vec = src.state()
    return [to_int64(v) for v in vec]


def format_table(values: list[int], per_line: int = 4) -> str:
    lines = []
    for i in range(0, len(values), per_line):
        chunk = values[i : i + per_line]
        lines.append("    " + " ".join(f"{v}," for v in chunk))
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.split("\n")[1])
    parser.add_argument(
        "--steps",
        type=int,
        default=FULL_STEPS,
        help=f"Generator steps to run (default {FULL_STEPS:,})",
    )
    parser.add_argument(
        "--mask63",
        action="store_true",
        help="Print only the low 63 bits of each word",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Compare the result with tapgen/cooked.py",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=0,
        metavar="N",
        help="Print progress to stderr every N steps",
    )
    args = parser.parse_args()

    values = cook(args.steps, args.report_every)
    if args.mask63:
        values = [v & MASK63 for v in values]

    print(f"# register after {args.steps:,} steps")
    print(format_table(values))

    if args.check:
        reference = list(RNG_COOKED)
        if args.mask63:
            reference = [v & MASK63 for v in reference]
        mismatches = sum(1 for a, b in zip(values, reference) if a != b)
        if mismatches:
            print(f"\n{mismatches} of {RNG_LEN} words differ from cooked.py")
            return 1
        print("\nMatches cooked.py")
    return 0


if __name__ == "__main__":
    sys.exit(main())
