"""Aggregated public view of the portfolio."""

from ._stats import compute_stats, months_between, years_experience
from .component import ViewBuilder, ViewSources
from .models import UNCATEGORIZED, PortfolioStats, PortfolioView, group_skills
from .ports import CollectionReaderPort

__all__ = [
    "ViewBuilder",
    "ViewSources",
    "PortfolioView",
    "PortfolioStats",
    "group_skills",
    "UNCATEGORIZED",
    "compute_stats",
    "months_between",
    "years_experience",
    "CollectionReaderPort",
]
