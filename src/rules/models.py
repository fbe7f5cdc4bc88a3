from typing import get_args

from pydantic import BaseModel, Field

from src.domain.entities import SkillCategory


class OwnerRules(BaseModel):
    bootstrap_from_env: bool = True
    password_min_length: int = 8
    reset_redirect_path: str = "/reset-password"
    reset_token_ttl_minutes: int = 60
    # Origins (scheme://host[:port]) a reset link may point at, besides the API itself
    allowed_redirect_origins: list[str] = Field(default_factory=list)


class SessionsRules(BaseModel):
    ttl_minutes: int = 60 * 24


class StatsDefaults(BaseModel):
    """Shown in place of a zero while the portfolio is still empty."""

    years_experience: int = 2
    projects_count: int = 8
    skills_count: int = 12
    certificates_count: int = 3
    technologies_count: int = 6


class LiveSyncRules(BaseModel):
    debounce_seconds: float = 0.25
    watched_tables: list[str] = Field(
        default_factory=lambda: [
            "profiles",
            "projects",
            "skills",
            "work_experiences",
            "education",
            "certificates",
            "references",
        ]
    )


class UploadRules(BaseModel):
    allowed_buckets: list[str] = Field(
        default_factory=lambda: ["profile-images", "project-images", "certificate-images"]
    )
    allowlist_mime_types: list[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/webp", "image/gif"]
    )
    max_upload_bytes: int = 5_000_000


class SkillRules(BaseModel):
    categories: list[str] = Field(default_factory=lambda: list(get_args(SkillCategory)))
    enforce_categories: bool = False


class Rules(BaseModel):
    owner: OwnerRules = Field(default_factory=OwnerRules)
    sessions: SessionsRules = Field(default_factory=SessionsRules)
    stats_defaults: StatsDefaults = Field(default_factory=StatsDefaults)
    live_sync: LiveSyncRules = Field(default_factory=LiveSyncRules)
    uploads: UploadRules = Field(default_factory=UploadRules)
    skills: SkillRules = Field(default_factory=SkillRules)
