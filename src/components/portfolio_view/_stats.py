"""Derived statistics over a portfolio snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from src.domain.entities import Skill, WorkExperience
from src.rules.models import StatsDefaults

from .models import PortfolioStats


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end, never negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(months, 0)


def years_experience(
    experiences: Iterable[WorkExperience], today: date, default: int
) -> int:
    rows = list(experiences)
    if not rows:
        return default

    total_months = 0
    for row in rows:
        end = today if row.current else (row.end_date or today)
        total_months += months_between(row.start_date, end)
    return max(total_months // 12, 1)


def _or_default(count: int, default: int) -> int:
    return count if count > 0 else default


def compute_stats(
    *,
    projects: Sequence[object],
    skills: Sequence[Skill],
    work_experiences: Sequence[WorkExperience],
    certificates: Sequence[object],
    now: datetime,
    defaults: StatsDefaults,
) -> PortfolioStats:
    categories = {s.category.strip() for s in skills if s.category and s.category.strip()}
    return PortfolioStats(
        years_experience=years_experience(
            work_experiences, now.date(), defaults.years_experience
        ),
        projects_count=_or_default(len(projects), defaults.projects_count),
        skills_count=_or_default(len(skills), defaults.skills_count),
        certificates_count=_or_default(len(certificates), defaults.certificates_count),
        technologies_count=_or_default(len(categories), defaults.technologies_count),
    )
