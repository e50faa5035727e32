"""Calculator modules for the labor cost tracker."""

from labor_cost.calculators.rates import (
    calculate_entry_cost,
    rate_for_type,
    resolve_entry_rate,
    resolve_rate,
)
from labor_cost.calculators.weeks import (
    days_since_sunday,
    iter_weeks,
    week_bounds,
    week_end,
    week_start,
    week_start_from_period,
)

__all__ = [
    # rates
    "calculate_entry_cost",
    "rate_for_type",
    "resolve_entry_rate",
    "resolve_rate",
    # weeks
    "days_since_sunday",
    "iter_weeks",
    "week_bounds",
    "week_end",
    "week_start",
    "week_start_from_period",
]
