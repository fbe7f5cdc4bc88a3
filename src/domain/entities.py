from datetime import UTC, date, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

# --- Enums / Literals ---
ChangeKind = Literal["insert", "update", "delete"]
SkillCategory = Literal["Frontend", "Backend", "Database", "DevOps", "Mobile", "Tools", "Other"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Accounts & Sessions ---

class Account(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Session(BaseModel):
    access_token: str
    account_id: UUID
    email: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=_utcnow)


# --- Portfolio content ---

class OwnedEntity(BaseModel):
    """Columns shared by every owner-authored row."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    display_order: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Profile(OwnedEntity):
    full_name: str | None = None
    title: str | None = None
    bio: str | None = None
    location: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    profile_image_url: str | None = None


class Project(OwnedEntity):
    title: str
    description: str
    technologies: list[str] = Field(default_factory=list)
    image_url: str | None = None
    github_url: str | None = None
    demo_url: str | None = None
    featured: bool = False


class Skill(OwnedEntity):
    name: str
    category: str
    proficiency_level: int = Field(default=3, ge=1, le=5)


class _Dated(OwnedEntity):
    start_date: date | None = None
    end_date: date | None = None
    current: bool = False

    @model_validator(mode="after")
    def _ignore_end_when_current(self) -> "_Dated":
        # A current position has no end, whatever the row says.
        if self.current:
            self.end_date = None
        return self


class WorkExperience(_Dated):
    company: str
    title: str
    location: str | None = None
    start_date: date
    description: str | None = None


class Education(_Dated):
    institution: str
    degree: str
    field_of_study: str | None = None
    grade: str | None = None
    description: str | None = None


class Certificate(OwnedEntity):
    title: str
    issuer: str
    issue_date: date | None = None
    expiry_date: date | None = None
    credential_id: str | None = None
    credential_url: str | None = None
    image_url: str | None = None
    description: str | None = None


class Reference(OwnedEntity):
    name: str
    title: str
    company: str
    relationship: str | None = None
    email: str | None = None
    phone: str | None = None
    recommendation: str | None = None
    image_url: str | None = None


class ContactMessage(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    email: str
    subject: str | None = None
    message: str
    read: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


# --- Change notifications ---

class ChangeEvent(BaseModel):
    table: str
    kind: ChangeKind
    row_id: str | None = None
    occurred_at: datetime = Field(default_factory=_utcnow)
