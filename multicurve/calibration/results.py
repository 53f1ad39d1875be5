"""Result dataclasses for the calibration stack."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CalibrationDiagnostics:
    """Outcome of one joint calibration run."""

    iterations: int
    accuracy: float

    def __iter__(self):
        yield self.iterations
        yield self.accuracy
