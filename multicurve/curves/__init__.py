"""
Curve implementations for the multi-curve calibration engine.
"""

from .base import Curve, CurveBuilder, CurvePoint, InterpolationEntity
from .discount import DiscountCurve
from .forward import AbstractForwardCurve, ForwardCurve, ForwardCurveFromDiscountCurve

__all__ = [
    "Curve",
    "CurveBuilder",
    "CurvePoint",
    "InterpolationEntity",
    "DiscountCurve",
    "AbstractForwardCurve",
    "ForwardCurve",
    "ForwardCurveFromDiscountCurve",
]
