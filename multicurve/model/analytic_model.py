"""
Immutable analytic model: a name-keyed collection of curves.
"""
import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence

from multicurve.curves import AbstractForwardCurve, DiscountCurve

logger = logging.getLogger(__name__)


class AnalyticModel:
    """
    Immutable mapping curve name -> curve.

    All modifications return a new model; curves that are not touched are
    shared by reference between the old and the new model.
    """

    def __init__(self, curves: Iterable = ()):
        by_name: Dict[str, object] = {}
        for curve in curves:
            by_name[curve.name] = curve
        self._curves = by_name

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get_curve(self, name: str):
        """Curve registered under ``name``, or None."""
        return self._curves.get(name)

    def get_discount_curve(self, name: str) -> Optional[DiscountCurve]:
        curve = self._curves.get(name)
        return curve if isinstance(curve, DiscountCurve) else None

    def get_forward_curve(self, name: str) -> Optional[AbstractForwardCurve]:
        curve = self._curves.get(name)
        return curve if isinstance(curve, AbstractForwardCurve) else None

    @property
    def curves(self) -> Mapping[str, object]:
        """Read-only view of the curves by name."""
        return MappingProxyType(self._curves)

    @property
    def names(self) -> Sequence[str]:
        return tuple(self._curves)

    def __contains__(self, name: str) -> bool:
        return name in self._curves

    def __iter__(self) -> Iterator[str]:
        return iter(self._curves)

    def __len__(self) -> int:
        return len(self._curves)

    # ------------------------------------------------------------------
    # Cloning
    # ------------------------------------------------------------------
    def add_curves(self, *curves) -> "AnalyticModel":
        """New model with ``curves`` added; a curve with an existing name replaces it."""
        new_model = AnalyticModel()
        new_model._curves = dict(self._curves)
        for curve in curves:
            if curve.name in new_model._curves:
                logger.debug("Replacing curve %s in model", curve.name)
            new_model._curves[curve.name] = curve
        return new_model

    def get_clone_for_parameter(self, curve_parameters: Optional[Mapping] = None) -> "AnalyticModel":
        """
        New model with the listed curves replaced by their clones for the given parameters.

        Args:
            curve_parameters: Mapping curve -> new parameter vector. Keys may be
                curve objects or curve names. Unlisted curves are shared.

        Returns:
            New AnalyticModel
        """
        new_model = AnalyticModel()
        new_model._curves = dict(self._curves)
        if not curve_parameters:
            return new_model

        for curve_key, parameter in curve_parameters.items():
            name = curve_key if isinstance(curve_key, str) else curve_key.name
            curve = self._curves.get(name)
            if curve is None:
                raise ValueError(f"Curve {name} is not part of the model")
            new_model._curves[name] = curve.get_clone_for_parameter(parameter)
        return new_model

    def __repr__(self) -> str:
        return f"AnalyticModel(curves={list(self._curves)})"
