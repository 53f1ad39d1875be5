"""
Base interface for analytic calibration products.
"""
from abc import ABC, abstractmethod
from typing import Optional

from multicurve.curves import AbstractForwardCurve, DiscountCurve


class AnalyticProduct(ABC):
    """Product that can be valued in closed form against an analytic model."""

    @abstractmethod
    def get_value(self, evaluation_time: float, model) -> float:
        """Value at ``evaluation_time`` in units of the discount factor at that time."""

    @staticmethod
    def _get_discount_curve(model, name: str) -> DiscountCurve:
        if model is None:
            raise ValueError("model is None")
        curve = model.get_discount_curve(name)
        if curve is None:
            raise ValueError(f"No discount curve with name '{name}' was found in the model: {model!r}")
        return curve

    @staticmethod
    def _get_forward_curve(model, name: Optional[str]) -> Optional[AbstractForwardCurve]:
        if not name:
            return None
        curve = model.get_forward_curve(name)
        if curve is None:
            raise ValueError(f"No forward curve with name '{name}' was found in the model: {model!r}")
        return curve
