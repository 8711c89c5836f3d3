"""
Dependency injection for API services.
"""

from functools import lru_cache

from .services.roster_service import RosterService
from .services.calculator_service import CalculatorService
from .services.chart_service import ChartService
from .services.page_view_service import PageViewService


@lru_cache()
def get_roster_service() -> RosterService:
    """Get RosterService singleton."""
    return RosterService()


@lru_cache()
def get_chart_service() -> ChartService:
    """Get ChartService singleton."""
    return ChartService(get_roster_service())


@lru_cache()
def get_calculator_service() -> CalculatorService:
    """Get CalculatorService singleton."""
    return CalculatorService(get_roster_service())


@lru_cache()
def get_page_view_service() -> PageViewService:
    """Get PageViewService singleton."""
    return PageViewService()
