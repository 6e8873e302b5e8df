"""
Forecasting Module for the Liquidity Planner

Weekly liquidity projection, uncertainty estimation, category breakdown
and insight generation.
"""

from .liquidity_projector import (
    LiquidityProjector,
    forecast_liquidity,
    monday_of,
    should_include_pattern
)
from .variance import HistoricalVarianceEstimator
from .category_breakdown import CategoryBreakdownAggregator
from .insights import InsightNarrator

__all__ = [
    'LiquidityProjector',
    'forecast_liquidity',
    'monday_of',
    'should_include_pattern',
    'HistoricalVarianceEstimator',
    'CategoryBreakdownAggregator',
    'InsightNarrator',
]
