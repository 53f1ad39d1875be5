"""
Analytic model holding the curves used for valuation.
"""

from .analytic_model import AnalyticModel

__all__ = ["AnalyticModel"]
