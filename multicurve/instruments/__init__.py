"""
Analytic calibration products.
"""

from .base import AnalyticProduct
from .deposit import Deposit, ForwardRateAgreement
from .swap import Swap, SwapLeg

__all__ = [
    "AnalyticProduct",
    "Deposit",
    "ForwardRateAgreement",
    "Swap",
    "SwapLeg",
]
