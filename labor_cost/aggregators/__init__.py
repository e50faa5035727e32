"""Aggregators module for weekly cost summaries.

This module groups time entries into calendar weeks and combines them with
employee rates to produce hours and cost totals.
"""

from labor_cost.aggregators.weekly_cost_aggregator import (
    UNKNOWN_EMPLOYEE,
    UNKNOWN_PROJECT,
    CostTotals,
    DailyLineItem,
    DateGroup,
    GroupBy,
    MissingReferencePolicy,
    ProjectCost,
    WeeklyAggregate,
    WeeklyCostAggregator,
    WeeklyTimesheet,
    aggregate,
    weekly_cost_matrix,
)

__all__ = [
    "UNKNOWN_EMPLOYEE",
    "UNKNOWN_PROJECT",
    "CostTotals",
    "DailyLineItem",
    "DateGroup",
    "GroupBy",
    "MissingReferencePolicy",
    "ProjectCost",
    "WeeklyAggregate",
    "WeeklyCostAggregator",
    "WeeklyTimesheet",
    "aggregate",
    "weekly_cost_matrix",
]
