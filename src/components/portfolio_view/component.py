"""
ViewBuilder - aggregates every public collection into one snapshot.

All collection reads are issued concurrently. The first failing read aborts
the build: pending reads are cancelled and AggregationError is raised, so a
caller only ever receives a complete view.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.domain.errors import AggregationError
from src.rules.models import StatsDefaults

from ._stats import compute_stats
from .models import PortfolioView
from .ports import CollectionReaderPort, TimePort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewSources:
    """One reader per public collection."""

    profiles: CollectionReaderPort
    projects: CollectionReaderPort
    skills: CollectionReaderPort
    work_experiences: CollectionReaderPort
    education: CollectionReaderPort
    certificates: CollectionReaderPort
    references: CollectionReaderPort

    @property
    def tables(self) -> tuple[str, ...]:
        return tuple(
            reader.table
            for reader in (
                self.profiles,
                self.projects,
                self.skills,
                self.work_experiences,
                self.education,
                self.certificates,
                self.references,
            )
        )


class ViewBuilder:
    def __init__(
        self,
        sources: ViewSources,
        time: TimePort,
        defaults: StatsDefaults | None = None,
    ) -> None:
        self.sources = sources
        self._time = time
        self._defaults = defaults or StatsDefaults()

    def _fetchers(self) -> dict[str, Callable[[], Any]]:
        s = self.sources
        return {
            "profile": s.profiles.get_one,
            "projects": s.projects.list,
            "skills": s.skills.list,
            "work_experiences": s.work_experiences.list,
            "education": s.education.list,
            "certificates": s.certificates.list,
            "references": s.references.list,
        }

    async def build_view(self) -> PortfolioView:
        """Fetch everything concurrently and derive stats.

        Raises:
            AggregationError: wrapping the first fetch that failed.
        """
        fetchers = self._fetchers()
        tasks = {
            name: asyncio.create_task(asyncio.to_thread(fn), name=f"fetch:{name}")
            for name, fn in fetchers.items()
        }

        done, pending = await asyncio.wait(
            tasks.values(), return_when=asyncio.FIRST_EXCEPTION
        )

        for name, task in tasks.items():
            if task not in done or task.cancelled():
                continue
            error = task.exception()
            if error is None:
                continue
            for p in pending:
                p.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            if not isinstance(error, Exception):
                raise error
            logger.warning("Portfolio view build failed on %s: %s", name, error)
            raise AggregationError(error, collection=name) from error

        results = {name: task.result() for name, task in tasks.items()}
        now = self._time.now_utc()

        view = PortfolioView(
            profile=results["profile"],
            projects=tuple(results["projects"]),
            skills=tuple(results["skills"]),
            work_experiences=tuple(results["work_experiences"]),
            education=tuple(results["education"]),
            certificates=tuple(results["certificates"]),
            references=tuple(results["references"]),
            stats=compute_stats(
                projects=results["projects"],
                skills=results["skills"],
                work_experiences=results["work_experiences"],
                certificates=results["certificates"],
                now=now,
                defaults=self._defaults,
            ),
            built_at=now,
        )
        logger.debug("Built portfolio view with stats %s", view.stats)
        return view
