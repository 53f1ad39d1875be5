"""Configuration of curve calibration runs."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got {value!r}")


@dataclass
class CalibrationConfig:
    """Configuration knobs for :class:`CalibratedCurves` and the solver."""

    evaluation_time: float = 0.0
    calibration_accuracy: float = 0.0
    max_iterations: int = 1000
    # None means min(2 * cpus, number of parameters)
    max_threads: Optional[int] = None
    # Native forward curves; otherwise forwards are implied from a discount curve
    use_forward_curve: bool = True
    create_default_curves_for_missing_curves: bool = False
    infer_tenor_from_curve_name: bool = False
    # Forward curve name -> index tenor code, e.g. {"EURIBOR-3M": "3M"}
    forward_curve_tenors: Dict[str, str] = field(default_factory=dict)
    cancel_event: Optional[threading.Event] = None

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.max_threads is not None and self.max_threads < 1:
            raise ValueError("max_threads must be at least 1")
        if self.calibration_accuracy < 0:
            raise ValueError("calibration_accuracy must be non-negative")

    @classmethod
    def from_env(cls, **overrides) -> "CalibrationConfig":
        """
        Build a config from environment switches.

        Reads ``MULTICURVE_USE_FORWARD_CURVE`` and
        ``MULTICURVE_CREATE_DEFAULT_CURVES``; keyword arguments take precedence.
        """
        values = {}
        env_switches = {
            "MULTICURVE_USE_FORWARD_CURVE": "use_forward_curve",
            "MULTICURVE_CREATE_DEFAULT_CURVES": "create_default_curves_for_missing_curves",
        }
        for variable, field_name in env_switches.items():
            raw = os.environ.get(variable)
            if raw is not None:
                values[field_name] = _parse_bool(variable, raw)
        values.update(overrides)
        return cls(**values)
