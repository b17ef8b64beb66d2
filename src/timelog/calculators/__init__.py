"""Duration policy, rate resolution and cost engine."""

from timelog.calculators.aggregations import (
    aggregate_by_day,
    aggregate_by_developer,
    aggregate_by_project,
)
from timelog.calculators.cost_engine import calculate_entry_costs
from timelog.calculators.durations import (
    RoundingInterval,
    calculate_duration,
    detect_overlap,
    find_overlaps,
    round_duration,
    validate_duration,
)
from timelog.calculators.finance_export import generate_finance_export, map_to_invoice
from timelog.calculators.rate_resolver import resolve_effective_rate
from timelog.calculators.types import EntryCost, FinanceExport, InvoiceMapping

__all__ = [
    "RoundingInterval",
    "round_duration",
    "calculate_duration",
    "validate_duration",
    "detect_overlap",
    "find_overlaps",
    "resolve_effective_rate",
    "calculate_entry_costs",
    "aggregate_by_project",
    "aggregate_by_developer",
    "aggregate_by_day",
    "generate_finance_export",
    "map_to_invoice",
    "EntryCost",
    "FinanceExport",
    "InvoiceMapping",
]
