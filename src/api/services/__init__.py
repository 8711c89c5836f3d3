"""API services."""

from .roster_service import RosterService
from .calculator_service import CalculatorService
from .chart_service import ChartService
from .page_view_service import CounterApiError, PageViewService

__all__ = [
    "RosterService",
    "CalculatorService",
    "ChartService",
    "CounterApiError",
    "PageViewService",
]
