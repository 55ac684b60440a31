#!/usr/bin/env python3
"""Run the test suite under coverage; settings live in pyproject.toml.

Usage (from the repo root):
    python scripts/run_coverage.py            # terminal report
    python scripts/run_coverage.py --html     # also write htmlcov/
"""

import argparse
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent


def coverage(*args: str) -> None:
    result = subprocess.run(
        [sys.executable, "-m", "coverage", *args], cwd=ROOT_DIR
    )
    if result.returncode != 0:
        sys.exit(result.returncode)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run tests under coverage")
    parser.add_argument(
        "--html", action="store_true", help="Write an HTML report too"
    )
    args = parser.parse_args()

    coverage("run", "-m", "pytest")
    coverage("report")
    if args.html:
        coverage("html")
        print(f"HTML report: {ROOT_DIR / 'htmlcov' / 'index.html'}")


if __name__ == "__main__":
    main()
