"""
Calculators Package

Provides all calculation components for arrears processing.
"""

from .aggregate import Severity, StatusAggregator
from .amounts import UnitAmountCalculator
from .arrears import ArrearsClassifier
from .due_dates import DueDateCalculator
from .interest import InterestAccrual, quantize_money
from .notifications import NotificationPlanner
from .plan import PlanResolver
from .progress import ProgressTracker

__all__ = [
    "PlanResolver",
    "DueDateCalculator",
    "ArrearsClassifier",
    "InterestAccrual",
    "UnitAmountCalculator",
    "StatusAggregator",
    "Severity",
    "ProgressTracker",
    "NotificationPlanner",
    "quantize_money",
]
