"""Analytic Hierarchy Process decision support."""

from .aggregator import AggregateResult, aggregate
from .consistency import classify_cr, consistency, cr_message, random_index
from .diagnostics import Diagnostic, diagnose
from .eigen import power_iteration
from .matrix import apply_judgment, build_neutral, judgment_from_value, judgment_value, set_pairwise
from .solver import AHPSolver, SolveResult, solve

__all__ = [
    "AggregateResult",
    "aggregate",
    "classify_cr",
    "consistency",
    "cr_message",
    "random_index",
    "Diagnostic",
    "diagnose",
    "power_iteration",
    "apply_judgment",
    "build_neutral",
    "judgment_from_value",
    "judgment_value",
    "set_pairwise",
    "AHPSolver",
    "SolveResult",
    "solve",
]
