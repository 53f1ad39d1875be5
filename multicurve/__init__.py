"""
multicurve: joint calibration of discount and forward curves.
"""

__version__ = "0.1.0"

from multicurve.calibration import (
    CalibratedCurves,
    CalibrationConfig,
    CalibrationSpec,
    Solver,
)
from multicurve.model import AnalyticModel

__all__ = [
    "AnalyticModel",
    "CalibratedCurves",
    "CalibrationConfig",
    "CalibrationSpec",
    "Solver",
    "__version__",
]
