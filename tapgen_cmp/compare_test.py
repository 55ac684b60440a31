"""Pytest integration for reference-vector comparison."""

import pytest

from .compare import TEST_SCENARIOS, run_comparison


@pytest.mark.parametrize(
    "scenario", TEST_SCENARIOS, ids=[s.name for s in TEST_SCENARIOS]
)
def test_reference_vectors(scenario):
    """Both source kinds reproduce the recorded reference outputs."""
    success, diffs, timing = run_comparison(scenario, verbose=True)

    if not success:
        error_msg = "Generator outputs differ:\n"
        for diff in diffs:
            error_msg += f"  - {diff}\n"
        pytest.fail(error_msg)


def test_scenario_names_unique():
    names = [s.name for s in TEST_SCENARIOS]
    assert len(names) == len(set(names))
