"""
Joint calibration of discount and forward curves from a list of calibration specs.
"""

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from multicurve.conventions import infer_tenor_from_curve_name, tenor_to_year_fraction
from multicurve.curves import (
    AbstractForwardCurve,
    DiscountCurve,
    ForwardCurve,
    ForwardCurveFromDiscountCurve,
)
from multicurve.instruments import AnalyticProduct, Deposit, ForwardRateAgreement, Swap, SwapLeg
from multicurve.model import AnalyticModel
from multicurve.optimizer import OptimizerFactory

from .config import CalibrationConfig
from .exceptions import CalibrationConfigurationError
from .results import CalibrationDiagnostics
from .solver import Solver
from .spec import CalibrationSpec

logger = logging.getLogger(__name__)

DISCOUNT_CURVE_SEED = 1.0
FORWARD_CURVE_SEED = 0.1


class CalibratedCurves:
    """
    Curves calibrated jointly to a list of calibration instruments.

    Specs are processed in order: each one creates the curves it references
    (if allowed), builds its product and adds one free point to its
    calibration curve. A single least-squares run then solves all pricing
    equations at once. Construction either succeeds completely or raises.

    Example:
        >>> spec = CalibrationSpec.single_leg(
        ...     "1Y", "deposit", (0.0, 1, 1.0), None, 0.02,
        ...     "discount", "discount", 1.0)
        >>> curves = CalibratedCurves([spec], model)
        >>> curves.get_curve("discount").get_discount_factor(1.0)
        0.980392...
    """

    def __init__(
        self,
        calibration_specs: Iterable[CalibrationSpec],
        model: Optional[AnalyticModel] = None,
        config: Optional[CalibrationConfig] = None,
        optimizer_factory: Optional[OptimizerFactory] = None,
    ):
        self.config = config or CalibrationConfig()
        self._calibration_specs = tuple(calibration_specs)
        if not self._calibration_specs:
            raise ValueError("At least one calibration spec is required")

        self._initial_model = model if model is not None else AnalyticModel()
        self._optimizer_factory = optimizer_factory

        self._model = self._initial_model
        self._objects_to_calibrate: Dict[str, object] = {}
        self._calibration_products: List[AnalyticProduct] = []
        self._products_by_spec: Dict[CalibrationSpec, AnalyticProduct] = {}
        self._products_by_symbol: Dict[str, AnalyticProduct] = {}
        # curve name -> symbol of the first spec referencing it
        self._referenced_curves: Dict[str, Optional[str]] = {}
        self._solver: Optional[Solver] = None
        self._diagnostics: Optional[CalibrationDiagnostics] = None

        for calibration_spec in self._calibration_specs:
            self._add(calibration_spec)

        self._check_referenced_curves()
        self._calibrate()

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    @property
    def model(self) -> AnalyticModel:
        """The calibrated model."""
        return self._model

    def get_model(self) -> AnalyticModel:
        return self._model

    def get_curve(self, name: str):
        return self._model.get_curve(name)

    @property
    def calibration_specs(self) -> tuple:
        return self._calibration_specs

    @property
    def diagnostics(self) -> CalibrationDiagnostics:
        return self._diagnostics

    @property
    def solver(self) -> Solver:
        return self._solver

    def get_last_number_of_iterations(self) -> int:
        return self._diagnostics.iterations

    def get_last_accuracy(self) -> float:
        return self._diagnostics.accuracy

    def get_calibration_product_for_spec(self, calibration_spec: CalibrationSpec) -> Optional[AnalyticProduct]:
        return self._products_by_spec.get(calibration_spec)

    def get_calibration_product_for_symbol(self, symbol: str) -> Optional[AnalyticProduct]:
        return self._products_by_symbol.get(symbol)

    def to_frame(self) -> pd.DataFrame:
        """One row per calibration instrument with its value in the calibrated model."""
        rows = []
        for calibration_spec, product in zip(self._calibration_specs, self._calibration_products):
            rows.append(
                {
                    "symbol": calibration_spec.symbol,
                    "type": calibration_spec.type,
                    "calibration_curve": calibration_spec.calibration_curve_name,
                    "calibration_time": calibration_spec.calibration_time,
                    "value": product.get_value(self.config.evaluation_time, self._model),
                }
            )
        return pd.DataFrame(
            rows, columns=["symbol", "type", "calibration_curve", "calibration_time", "value"]
        )

    # ------------------------------------------------------------------
    # Sensitivities
    # ------------------------------------------------------------------
    def get_clone_shifted(
        self, symbol: Union[str, re.Pattern], shift: float
    ) -> "CalibratedCurves":
        """
        Recalibrate with the quotes of the matching instruments shifted.

        Args:
            symbol: Instrument symbol, or a compiled pattern matched against
                the full symbol
            shift: Additive shift applied to the quoted spread

        Returns:
            New CalibratedCurves built from the same starting model
        """
        if isinstance(symbol, re.Pattern):
            def is_match(spec_symbol):
                return spec_symbol is not None and symbol.fullmatch(spec_symbol) is not None
        else:
            def is_match(spec_symbol):
                return spec_symbol == symbol

        shifted_specs = []
        number_shifted = 0
        for calibration_spec in self._calibration_specs:
            if is_match(calibration_spec.symbol):
                calibration_spec = calibration_spec.get_clone_shifted(shift)
                number_shifted += 1
            shifted_specs.append(calibration_spec)

        if number_shifted == 0:
            logger.warning("No calibration instrument matches %r; recalibrating unshifted", symbol)
        return self._get_clone_for_specs(shifted_specs)

    def get_clone_shifted_for_regex(self, regex: str, shift: float) -> "CalibratedCurves":
        return self.get_clone_shifted(re.compile(regex), shift)

    def get_clone_shifted_map(self, shifts: Mapping[str, float]) -> "CalibratedCurves":
        """Recalibrate with one shift per instrument symbol."""
        shifted_specs = []
        for calibration_spec in self._calibration_specs:
            shift = shifts.get(calibration_spec.symbol)
            if shift is not None:
                calibration_spec = calibration_spec.get_clone_shifted(shift)
            shifted_specs.append(calibration_spec)
        return self._get_clone_for_specs(shifted_specs)

    def _get_clone_for_specs(self, calibration_specs: List[CalibrationSpec]) -> "CalibratedCurves":
        return CalibratedCurves(
            calibration_specs,
            self._initial_model,
            self.config,
            self._optimizer_factory,
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _calibrate(self) -> None:
        solver = Solver(
            self._model,
            self._calibration_products,
            evaluation_time=self.config.evaluation_time,
            calibration_accuracy=self.config.calibration_accuracy,
            optimizer_factory=self._optimizer_factory,
            max_iterations=self.config.max_iterations,
            max_threads=self.config.max_threads,
            cancel_event=self.config.cancel_event,
        )
        self._model = solver.get_calibrated_model(self._objects_to_calibrate.values())
        self._solver = solver
        self._diagnostics = CalibrationDiagnostics(solver.iterations, solver.accuracy)
        logger.info(
            "Calibrated %d curves to %d instruments (iterations=%d, accuracy=%.3e)",
            len(self._objects_to_calibrate),
            len(self._calibration_products),
            solver.iterations,
            solver.accuracy,
        )

    def _check_referenced_curves(self) -> None:
        """Every curve a product reads must have points once all specs are added."""
        for name, symbol in self._referenced_curves.items():
            points = getattr(self._model.get_curve(name), "points", None)
            if points is not None and len(points) == 0:
                raise CalibrationConfigurationError(
                    f"Calibration spec {symbol}: curve '{name}' has no points "
                    f"and no calibration spec adds one"
                )

    def _add(self, calibration_spec: CalibrationSpec) -> None:
        """Create the product of ``calibration_spec`` and one new free point on its calibration curve."""
        product = self._create_product(calibration_spec)

        curve_name = calibration_spec.calibration_curve_name
        calibration_curve = self._model.get_curve(curve_name)
        if calibration_curve is None:
            raise CalibrationConfigurationError(
                f"Calibration spec {calibration_spec.symbol}: calibration curve "
                f"'{curve_name}' (calibration_curve_name) does not exist in the model"
            )
        if not hasattr(calibration_curve, "get_clone_builder"):
            raise CalibrationConfigurationError(
                f"Calibration spec {calibration_spec.symbol}: curve '{curve_name}' "
                f"of type {type(calibration_curve).__name__} has no calibration points"
            )

        calibration_time = calibration_spec.calibration_time
        if any(point.time == calibration_time for point in calibration_curve.points):
            raise CalibrationConfigurationError(
                f"Calibration spec {calibration_spec.symbol}: curve '{curve_name}' "
                f"already has a point at calibration_time {calibration_time}"
            )

        if isinstance(calibration_curve, DiscountCurve):
            seed = DISCOUNT_CURVE_SEED
        elif isinstance(calibration_curve, AbstractForwardCurve):
            seed = FORWARD_CURVE_SEED
        else:
            seed = DISCOUNT_CURVE_SEED

        self._objects_to_calibrate.pop(curve_name, None)
        new_curve = calibration_curve.get_clone_builder().add_point(calibration_time, seed, True).build()
        self._model = self._model.add_curves(new_curve)
        self._objects_to_calibrate[curve_name] = new_curve

        self._calibration_products.append(product)
        self._products_by_spec[calibration_spec] = product
        if calibration_spec.symbol is not None:
            self._products_by_symbol[calibration_spec.symbol] = product

        logger.debug(
            "Added %s %s: point t=%.6f on curve %s",
            calibration_spec.type,
            calibration_spec.symbol,
            calibration_time,
            curve_name,
        )

    def _create_product(self, calibration_spec: CalibrationSpec) -> AnalyticProduct:
        spec = calibration_spec
        discount_receiver = self._ensure_discount_curve(
            spec.discount_curve_receiver_name, spec, "discount_curve_receiver_name"
        )
        discount_payer = self._ensure_discount_curve(
            spec.discount_curve_payer_name, spec, "discount_curve_payer_name"
        )
        forward_receiver = self._ensure_forward_curve(
            spec.forward_curve_receiver_name,
            spec.index_tenor_receiver,
            spec,
            "forward_curve_receiver_name",
        )
        forward_payer = self._ensure_forward_curve(
            spec.forward_curve_payer_name,
            spec.index_tenor_payer,
            spec,
            "forward_curve_payer_name",
        )

        product_type = spec.product_type
        schedule_receiver = spec.schedule_receiver

        if product_type == "deposit":
            return Deposit(schedule_receiver, spec.spread_receiver, discount_receiver)

        if product_type in ("fra", "future"):
            if forward_receiver is None:
                raise CalibrationConfigurationError(
                    f"Calibration spec {spec.symbol}: type {spec.type} needs forward_curve_receiver_name"
                )
            rate = spec.spread_receiver
            if product_type == "future":
                rate = 1.0 - spec.spread_receiver / 100.0
            return ForwardRateAgreement(schedule_receiver, rate, forward_receiver, discount_receiver)

        if product_type == "swapleg":
            return SwapLeg(
                schedule_receiver,
                forward_receiver,
                spec.spread_receiver,
                discount_receiver,
                is_notional_exchanged=True,
            )

        swap_types = {
            "swap": (None, None),
            "swapwithresetonreceiver": (discount_payer, None),
            "swapwithresetonpayer": (None, discount_receiver),
        }
        if product_type not in swap_types:
            raise CalibrationConfigurationError(
                f"Calibration spec {spec.symbol}: product of type {spec.type} unknown"
            )
        if spec.schedule_payer is None or discount_payer is None:
            raise CalibrationConfigurationError(
                f"Calibration spec {spec.symbol}: type {spec.type} needs "
                f"schedule_payer and discount_curve_payer_name"
            )

        reset_receiver, reset_payer = swap_types[product_type]
        leg_receiver = SwapLeg(
            schedule_receiver,
            forward_receiver,
            spec.spread_receiver,
            discount_receiver,
            discount_curve_for_notional_reset_name=reset_receiver,
            is_notional_exchanged=True,
        )
        leg_payer = SwapLeg(
            spec.schedule_payer,
            forward_payer,
            spec.spread_payer,
            discount_payer,
            discount_curve_for_notional_reset_name=reset_payer,
            is_notional_exchanged=True,
        )
        return Swap(leg_receiver, leg_payer)

    def _ensure_discount_curve(
        self, name: Optional[str], spec: CalibrationSpec, field_name: str
    ) -> Optional[str]:
        if not name:
            return None
        self._referenced_curves.setdefault(name, spec.symbol)

        curve = self._model.get_curve(name)
        if curve is not None:
            if not isinstance(curve, DiscountCurve):
                raise CalibrationConfigurationError(
                    f"Calibration spec {spec.symbol}: curve '{name}' ({field_name}) "
                    f"is a {type(curve).__name__}, not a discount curve"
                )
            return name

        if not self.config.create_default_curves_for_missing_curves:
            raise CalibrationConfigurationError(
                f"Calibration spec {spec.symbol}: discount curve '{name}' ({field_name}) "
                f"does not exist in the model"
            )

        logger.debug("Creating default discount curve %s", name)
        self._model = self._model.add_curves(
            DiscountCurve(name, [(0.0, 1.0, False)], reference_date=spec.schedule_receiver.reference_date)
        )
        return name

    def _ensure_forward_curve(
        self,
        name: Optional[str],
        index_tenor: Optional[str],
        spec: CalibrationSpec,
        field_name: str,
    ) -> Optional[str]:
        """Make sure a forward curve named ``name`` can be resolved; returns the name products use."""
        if not name:
            return None
        self._referenced_curves.setdefault(name, spec.symbol)

        payment_offset = self._get_payment_offset(name, index_tenor, spec, field_name)
        reference_date = spec.schedule_receiver.reference_date

        curve = self._model.get_curve(name)
        if curve is None:
            if not self.config.create_default_curves_for_missing_curves:
                raise CalibrationConfigurationError(
                    f"Calibration spec {spec.symbol}: forward curve '{name}' ({field_name}) "
                    f"does not exist in the model"
                )
            if self.config.use_forward_curve:
                logger.debug("Creating default forward curve %s", name)
                curve = ForwardCurve(name, payment_offset=payment_offset, reference_date=reference_date)
            else:
                logger.debug("Creating default discount curve %s for forwards", name)
                curve = DiscountCurve(name, [(0.0, 1.0, False)], reference_date=reference_date)
            self._model = self._model.add_curves(curve)

        if isinstance(curve, DiscountCurve):
            forward_curve = ForwardCurveFromDiscountCurve(
                curve.name, payment_offset, reference_date=reference_date
            )
            if forward_curve.name not in self._model:
                self._model = self._model.add_curves(forward_curve)
            return forward_curve.name

        if isinstance(curve, AbstractForwardCurve):
            return curve.name

        raise CalibrationConfigurationError(
            f"Calibration spec {spec.symbol}: curve '{name}' ({field_name}) "
            f"is a {type(curve).__name__}, not a forward curve"
        )

    def _get_payment_offset(
        self, name: str, index_tenor: Optional[str], spec: CalibrationSpec, field_name: str
    ) -> Optional[float]:
        tenor = index_tenor or self.config.forward_curve_tenors.get(name)
        if tenor is None and self.config.infer_tenor_from_curve_name:
            tenor = infer_tenor_from_curve_name(name)
        if tenor is None:
            return None
        try:
            return tenor_to_year_fraction(tenor)
        except ValueError as exc:
            raise CalibrationConfigurationError(
                f"Calibration spec {spec.symbol}: invalid index tenor {tenor!r} for {field_name}"
            ) from exc
