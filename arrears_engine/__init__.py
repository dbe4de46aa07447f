"""
AUCTION ARREARS ENGINE
Payment schedule, arrears classification and late-interest accrual
"""

from .events import PlanEditStore, PlanEventBus, PlanParametersChanged
from .models import Auction, Bidder, Lot, PaymentPlan, PortfolioResult
from .processor import PortfolioProcessor

__all__ = [
    'PortfolioProcessor', 'Auction', 'Lot', 'Bidder', 'PaymentPlan', 'PortfolioResult',
    'PlanEventBus', 'PlanEditStore', 'PlanParametersChanged',
]
