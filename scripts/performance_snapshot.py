#!/usr/bin/env python3
"""Time gross-to-net and net-to-gross conversions for every shipped regime."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from vnpit.backend.app.services.calculation_service import calculate_tax  # noqa: E402
from vnpit.backend.config.regime_config import available_regimes  # noqa: E402

SAMPLE_PAYLOAD = {
    "locale": "vi",
    "income": 45_000_000,
    "region": "I",
    "dependents": 1,
    "additional_incomes": [
        {"label": "Dạy thêm", "amount": 3_000_000, "type": "FREELANCE"},
        {"label": "Cổ tức", "amount": 1_500_000, "type": "INVESTMENT"},
    ],
}


def measure(payload: dict[str, object], iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated calculations of ``payload``."""

    calculate_tax(payload)  # Warm configuration cache
    start = perf_counter()
    for _ in range(iterations):
        calculate_tax(payload)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("VNPIT_PROFILE_ITERATIONS", "200"))
    report: dict[str, dict[str, dict[str, float]]] = {}
    for regime_id in available_regimes():
        report[regime_id] = {
            income_type.lower(): measure(
                {**SAMPLE_PAYLOAD, "regime": regime_id, "income_type": income_type},
                iterations,
            )
            for income_type in ("GROSS", "NET")
        }
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
