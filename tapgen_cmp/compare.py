"""Reference-vector comparison for the tap generator.

Each scenario replays one operation from a fixed seed and checks the
output against values recorded from the reference generator. Every
scenario runs twice, once over an unsynchronized ``RngSource`` and once
over a ``LockedSource``, and the two runs must also agree with each other.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from tapgen.rand import Rand
from tapgen.source import LockedSource, RngSource


@dataclass
class ReferenceScenario:
    """One recorded sequence: ``op(*args)`` called ``count`` times.

    ``shuffle`` and ``perm`` are called once; ``expected`` is their result.
    """

    name: str
    seed: int
    op: str
    expected: list[Any]
    args: tuple = ()
    # Relative tolerance for float results; 0.0 demands bit equality.
    rel_tol: float = 0.0

    @property
    def count(self) -> int:
        return len(self.expected)


def _draw_zipf(rand: Rand, args: tuple, count: int) -> list[int]:
    z = rand.new_zipf(*args)
    return [z.draw() for _ in range(count)]


def _draw_shuffle(rand: Rand, args: tuple, count: int) -> list[int]:
    seq = list(args[0])
    rand.shuffle(seq)
    return seq


def _draw_perm(rand: Rand, args: tuple, count: int) -> list[int]:
    return rand.perm(*args)


_SPECIAL_OPS: dict[str, Callable[[Rand, tuple, int], list]] = {
    "zipf": _draw_zipf,
    "shuffle": _draw_shuffle,
    "perm": _draw_perm,
}


def draw_sequence(rand: Rand, scenario: ReferenceScenario) -> list[Any]:
    """Replay ``scenario`` against ``rand`` and return the outputs."""
    special = _SPECIAL_OPS.get(scenario.op)
    if special is not None:
        return special(rand, scenario.args, scenario.count)
    method = getattr(rand, scenario.op)
    return [method(*scenario.args) for _ in range(scenario.count)]


def _expected_values(scenario: ReferenceScenario) -> list[Any]:
    # Recorded float32 values are shortest decimal forms; parse them back
    # through single precision.
    if scenario.op == "float32":
        return [float(np.float32(str(e))) for e in scenario.expected]
    return list(scenario.expected)


def _values_match(a: Any, b: Any, rel_tol: float) -> bool:
    if rel_tol > 0.0 and isinstance(a, float) and isinstance(b, float):
        return abs(a - b) <= rel_tol * max(abs(a), abs(b))
    return a == b


def compare_sequences(
    label: str, expected: list[Any], got: list[Any], rel_tol: float = 0.0
) -> tuple[bool, list[str]]:
    """Element-wise comparison. Returns (match, diffs)."""
    diffs = []
    if len(expected) != len(got):
        diffs.append(
            f"{label}: length mismatch: {len(expected)} vs {len(got)}"
        )
    for i, (e, g) in enumerate(zip(expected, got)):
        if not _values_match(e, g, rel_tol):
            diffs.append(f"{label}[{i}]: expected {e!r}, got {g!r}")
    return len(diffs) == 0, diffs


# ---------------------------------------------------------------------------
# Recorded reference sequences
# ---------------------------------------------------------------------------

SEED1_INT64 = [
    5577006791947779410, 8674665223082153551, 6129484611666145821,
    4037200794235010051, 3916589616287113937, 6334824724549167320,
    605394647632969758, 1443635317331776148, 894385949183117216,
    2775422040480279449, 4751997750760398084, 7504504064263669287,
    1976235410884491574, 3510942875414458836, 2933568871211445515,
    4324745483838182873, 2610529275472644968, 2703387474910584091,
    6263450610539110790, 2015796113853353331, 1874068156324778273,
    3328451335138149956, 5263531936693774911, 7955079406183515637,
    2703501726821866378, 2740103009342231109, 6941261091797652072,
    1905388747193831650, 7981306761429961588, 6426100070888298971,
    4831389563158288344, 261049867304784443, 1460320609597786623,
    5600924393587988459, 8995016276575641803, 732830328053361739,
    5486140987150761883, 545291762129038907, 6382800227808658932,
    2781055864473387780, 1598098976185383115, 4990765271833742716,
    5018949295715050020, 2568779411109623071, 3902890183311134652,
    4893789450120281907, 2338498362660772719, 2601737961087659062,
    7273596521315663110, 3337066551442961397,
]

SEED1_INT32 = [
    1298498081, 2019727887, 1427131847, 939984059, 911902081, 1474941318,
    140954425, 336122540, 208240456, 646203300, 1106410694, 1747278511,
    460128162, 817455089, 683024728, 1006933274, 607811211, 629431445,
    1458323237, 469339106, 436340495, 774965466, 1225511528, 1852186258,
    629458047, 637979947, 1616138287, 443632888, 1858292790, 1496193015,
    1124895541, 60780408, 340007387, 1304066831, 2094315429, 170625356,
    1277341737, 126960631, 1486111485, 647515026, 372086413, 1162003090,
    1168565194, 598090563, 908712433, 1139424147, 544474078, 605764324,
    1693516159, 776971353,
]

SEED1_INT32N_100 = [
    81, 87, 47, 59, 81, 18, 25, 40, 56, 0, 94, 11, 62, 89, 28, 74, 11, 45,
    37, 6, 95, 66, 28, 58, 47, 47, 87, 88, 90, 15, 41, 8, 87, 31, 29, 56,
    37, 31, 85, 26, 13, 90, 94, 63, 33, 47, 78, 24, 59, 53,
]

SEED1_INT64N_100 = [
    10, 51, 21, 51, 37, 20, 58, 48, 16, 49, 84, 87, 74, 36, 15, 73, 68, 91,
    90, 31, 73, 56, 11, 37, 78, 9, 72, 50, 88, 71, 44, 43, 23, 59, 3, 39,
    83, 7, 32, 80, 15, 16, 20, 71, 52, 7, 19, 62, 10, 97,
]

TEST_SCENARIOS = [
    ReferenceScenario("seed1_int64", 1, "int64", SEED1_INT64),
    ReferenceScenario("seed1_int32", 1, "int32", SEED1_INT32),
    ReferenceScenario(
        "seed1_int32n_100", 1, "int32n", SEED1_INT32N_100, args=(100,)
    ),
    ReferenceScenario(
        "seed1_int64n_100", 1, "int64n", SEED1_INT64N_100, args=(100,)
    ),
    ReferenceScenario(
        "seed1_uint64",
        1,
        "uint64",
        [
            5577006791947779410, 8674665223082153551, 15352856648520921629,
            13260572831089785859, 3916589616287113937,
        ],
    ),
    ReferenceScenario(
        "seed1_uint32",
        1,
        "uint32",
        [
            2596996162, 4039455774, 2854263694, 1879968118, 1823804162,
            2949882636, 281908850, 672245080,
        ],
    ),
    ReferenceScenario(
        "seed1_int32n_20",
        1,
        "int32n",
        [1, 7, 7, 19, 1, 18, 5, 0, 16, 0, 14, 11, 2, 9, 8, 14, 11, 5, 17, 6],
        args=(20,),
    ),
    ReferenceScenario(
        "seed1_int64n_pow2_40",
        1,
        "int64n",
        [141867941202, 66022479439, 856419562013, 805227559939, 555288552145],
        args=(1 << 40,),
    ),
    ReferenceScenario(
        "seed1_int64n_large",
        1,
        "int64n",
        [
            577006791947779375, 674665223082153495, 129484611666145779,
            37200794235010023, 916589616287113916,
        ],
        args=(1000000000000000007,),
    ),
    ReferenceScenario(
        "seed1_float64",
        1,
        "float64",
        [
            0.6046602879796196, 0.9405090880450124, 0.6645600532184904,
            0.4377141871869802, 0.4246374970712657,
        ],
    ),
    ReferenceScenario(
        "seed1_float32",
        1,
        "float32",
        ["0.6046603", "0.9405091", "0.6645601", "0.4377142", "0.4246375"],
    ),
    ReferenceScenario(
        "seed0_int64",
        0,
        "int64",
        [8717895732742165505, 2259404117704393152, 6050128673802995827],
    ),
    ReferenceScenario(
        "seed_zero_substitute_int64",
        89482311,
        "int64",
        [8717895732742165505, 2259404117704393152, 6050128673802995827],
    ),
    ReferenceScenario(
        "seed_minus1_int64",
        -1,
        "int64",
        [3644962268338389676, 550171362161912239, 3094056749125766625],
    ),
    ReferenceScenario(
        "seed42_int64",
        42,
        "int64",
        [3440579354231278675, 608747136543856411, 5571782338101878760],
    ),
    ReferenceScenario(
        "seed_2_40_int64",
        1 << 40,
        "int64",
        [5470237361722394362, 6322525149314491254, 1177463506020107830],
    ),
    ReferenceScenario(
        "seed_int64_min_int64",
        -(1 << 63),
        "int64",
        [7681445645332086223, 6777158040660201103, 8748006033234207912],
    ),
    ReferenceScenario(
        "seed1_shuffle_20",
        1,
        "shuffle",
        [13, 16, 9, 11, 6, 10, 14, 3, 8, 18, 7, 5, 1, 19, 4, 20, 17, 12, 15, 2],
        args=(range(1, 21),),
    ),
    ReferenceScenario(
        "seed1_perm_10", 1, "perm", [9, 4, 2, 6, 8, 0, 3, 1, 7, 5], args=(10,)
    ),
    ReferenceScenario(
        "seed1_norm_float64",
        1,
        "norm_float64",
        [
            -1.233758177597947, -0.12634751070237293, -0.5209945711531503,
            2.28571911769958, 0.3228052526115799, 0.5900672875996937,
            0.15880774017643562, 0.9892020842955818, -0.731283016177479,
            0.6863807850359727,
        ],
        rel_tol=1e-12,
    ),
    ReferenceScenario(
        "seed1_zipf_1_5_100",
        1,
        "zipf",
        [0, 0, 0, 2, 0, 30, 11, 20, 4, 1, 0, 7, 2, 3, 1, 4, 4, 0, 6, 7],
        args=(1.5, 100),
    ),
    ReferenceScenario(
        "seed7_zipf_2_10_offset3",
        7,
        "zipf",
        [0, 4, 3, 0, 0, 5, 2, 2, 8, 0, 1, 2, 5, 0, 5, 4, 0, 0, 0, 5],
        args=(2.0, 10, 3.0),
    ),
]


@dataclass
class ComparisonTiming:
    """Timing breakdown for a single comparison run."""

    rng_secs: float
    locked_secs: float

    @property
    def total_secs(self) -> float:
        return self.rng_secs + self.locked_secs


def run_comparison(
    scenario: ReferenceScenario,
    verbose: bool = False,
) -> tuple[bool, list[str], ComparisonTiming]:
    """Replay a scenario over both source kinds and compare.

    Returns:
        (success: bool, diffs: list of error messages, timing)
    """
    diffs = []
    expected = _expected_values(scenario)

    t0 = time.perf_counter()
    rng_got = draw_sequence(Rand(RngSource(scenario.seed)), scenario)
    rng_secs = time.perf_counter() - t0

    t0 = time.perf_counter()
    locked_got = draw_sequence(
        Rand(LockedSource(seed=scenario.seed)), scenario
    )
    locked_secs = time.perf_counter() - t0

    _, d = compare_sequences("rng", expected, rng_got, scenario.rel_tol)
    diffs.extend(d)
    _, d = compare_sequences("locked vs rng", rng_got, locked_got)
    diffs.extend(d)

    if verbose and diffs:
        print("\nDifferences found:")
        for diff in diffs:
            print(f"  - {diff}")

    return (
        len(diffs) == 0,
        diffs,
        ComparisonTiming(rng_secs=rng_secs, locked_secs=locked_secs),
    )


def _format_result(
    name: str,
    success: bool,
    diffs: list[str],
    timing: Optional[ComparisonTiming],
    verbose: bool,
) -> str:
    """Format a single scenario result as a printable string."""
    if timing:
        time_str = (
            f"  ({timing.total_secs * 1000:.2f}ms"
            f" - rng {timing.rng_secs * 1000:.2f}ms"
            f", locked {timing.locked_secs * 1000:.2f}ms)"
        )
    else:
        time_str = ""

    if success:
        return f"✓ {name}{time_str}"
    else:
        lines = [f"✗ {name}{time_str}"]
        if verbose:
            for diff in diffs:
                lines.append(f"    {diff}")
        return "\n".join(lines)


def main():
    """CLI entry point with pytest-compatible exit codes."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Check generator output against reference vectors"
    )
    parser.add_argument(
        "--scenario",
        type=str,
        help="Run specific scenario by name",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print detailed comparison output",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop on first failure",
    )

    args = parser.parse_args()

    scenarios = list(TEST_SCENARIOS)
    if args.scenario:
        scenarios = [s for s in scenarios if s.name == args.scenario]
        if not scenarios:
            print(f"Scenario '{args.scenario}' not found")
            return 1

    passed = 0
    failed = 0
    for scenario in scenarios:
        success, diffs, timing = run_comparison(scenario, args.verbose)
        print(
            _format_result(scenario.name, success, diffs, timing, args.verbose)
        )
        if success:
            passed += 1
        else:
            failed += 1
            if args.fail_fast:
                print(f"\n{passed} passed, {failed} failed (stopped early)")
                return 1

    print(f"\n{passed} passed, {failed} failed")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
