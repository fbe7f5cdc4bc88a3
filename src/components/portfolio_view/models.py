"""
Portfolio view models.

A PortfolioView is one complete, consistent snapshot of every public
collection plus the statistics derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.domain.entities import (
    Certificate,
    Education,
    Profile,
    Project,
    Reference,
    Skill,
    WorkExperience,
)

UNCATEGORIZED = "Other"


@dataclass(frozen=True)
class PortfolioStats:
    years_experience: int
    projects_count: int
    skills_count: int
    certificates_count: int
    technologies_count: int

    def to_dict(self) -> dict[str, int]:
        return {
            "yearsExperience": self.years_experience,
            "projectsCount": self.projects_count,
            "skillsCount": self.skills_count,
            "certificatesCount": self.certificates_count,
            "technologiesCount": self.technologies_count,
        }


def group_skills(skills: tuple[Skill, ...] | list[Skill]) -> dict[str, list[Skill]]:
    """Group skills by category, keeping first-seen category order."""
    groups: dict[str, list[Skill]] = {}
    for skill in skills:
        category = (skill.category or "").strip() or UNCATEGORIZED
        groups.setdefault(category, []).append(skill)
    return groups


@dataclass(frozen=True)
class PortfolioView:
    profile: Profile | None
    projects: tuple[Project, ...]
    skills: tuple[Skill, ...]
    work_experiences: tuple[WorkExperience, ...]
    education: tuple[Education, ...]
    certificates: tuple[Certificate, ...]
    references: tuple[Reference, ...]
    stats: PortfolioStats
    built_at: datetime
    seq: int = field(default=0, compare=False)

    def skills_by_category(self) -> dict[str, list[Skill]]:
        return group_skills(self.skills)

    def to_dict(self) -> dict[str, Any]:
        def dump(items: tuple[Any, ...]) -> list[dict[str, Any]]:
            return [item.model_dump(mode="json") for item in items]

        return {
            "profile": self.profile.model_dump(mode="json") if self.profile else None,
            "projects": dump(self.projects),
            "skills": dump(self.skills),
            "skillsByCategory": {
                category: dump(tuple(items))
                for category, items in self.skills_by_category().items()
            },
            "workExperiences": dump(self.work_experiences),
            "education": dump(self.education),
            "certificates": dump(self.certificates),
            "references": dump(self.references),
            "stats": self.stats.to_dict(),
            "builtAt": self.built_at.isoformat(),
        }
