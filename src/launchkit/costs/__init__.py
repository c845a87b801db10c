"""
Cost tracking module -- API spend, projections, budgets and suggestions.

Exports the main components of the ``api-cost-tracker`` command.
"""

from .prices import PricingResolver, ResolvedPricing, resolve_pricing
from .report import CostReport, ProjectEntry, ProviderTotals, ReportRenderer, format_currency
from .tracker import (
    CostTracker,
    RecentWindow,
    build_recent_window,
    compute_cost,
    daily_projection,
    days_in_month,
)

__all__ = [
    "PricingResolver",
    "ResolvedPricing",
    "resolve_pricing",
    "CostTracker",
    "CostReport",
    "ProjectEntry",
    "ProviderTotals",
    "ReportRenderer",
    "RecentWindow",
    "build_recent_window",
    "compute_cost",
    "daily_projection",
    "days_in_month",
    "format_currency",
]
