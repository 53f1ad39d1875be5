"""
Multi-curve calibration engine: parameter aggregation, solver and calibrated curves.
"""

from .aggregation import ParameterAggregation
from .calibrated_curves import CalibratedCurves
from .config import CalibrationConfig
from .exceptions import (
    CalibrationCancelledError,
    CalibrationConfigurationError,
    CloneNotSupportedError,
    SolverError,
)
from .parameter import MutableParameterObject, ParameterObject
from .results import CalibrationDiagnostics
from .solver import Solver
from .spec import CalibrationSpec
from .transformation import (
    BoundedParameterTransformation,
    ParameterTransformation,
    PositiveParameterTransformation,
)

__all__ = [
    "ParameterObject",
    "MutableParameterObject",
    "ParameterAggregation",
    "ParameterTransformation",
    "BoundedParameterTransformation",
    "PositiveParameterTransformation",
    "Solver",
    "CalibrationSpec",
    "CalibrationConfig",
    "CalibrationDiagnostics",
    "CalibratedCurves",
    "CalibrationConfigurationError",
    "SolverError",
    "CalibrationCancelledError",
    "CloneNotSupportedError",
]
