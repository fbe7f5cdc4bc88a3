"""
Entity schemas: table binding, required fields and input coercion.

One EntitySchema per portfolio entity. Repositories are parameterized by a
schema instead of carrying per-entity logic.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.domain.entities import (
    Certificate,
    ContactMessage,
    Education,
    Profile,
    Project,
    Reference,
    Skill,
    WorkExperience,
)
from src.domain.errors import ValidationError

E = TypeVar("E", bound=BaseModel)

# Columns the adapter maintains; callers may never set them.
SYSTEM_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})

TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})

OrderSpec = tuple[tuple[str, bool], ...]


def split_csv(value: str) -> list[str]:
    """Split a comma-separated string into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass(frozen=True)
class EntitySchema(Generic[E]):
    """Shape and write rules for one stored entity."""

    name: str
    table: str
    model: type[E]
    required: tuple[str, ...] = ()
    int_fields: tuple[str, ...] = ()
    bool_fields: tuple[str, ...] = ()
    date_fields: tuple[str, ...] = ()
    list_fields: tuple[str, ...] = ()
    int_ranges: dict[str, tuple[int, int]] = field(default_factory=dict)
    choices: dict[str, tuple[str, ...]] = field(default_factory=dict)
    # None means every non-system field may change after creation
    mutable_fields: tuple[str, ...] | None = None
    owned: bool = True
    default_order: OrderSpec = (("display_order", True), ("created_at", True))

    @property
    def writable_fields(self) -> frozenset[str]:
        return frozenset(self.model.model_fields) - SYSTEM_FIELDS

    def with_choices(self, field_name: str, values: tuple[str, ...]) -> EntitySchema[E]:
        """Return a copy restricting field_name to a closed set of values."""
        return dataclasses.replace(self, choices={**self.choices, field_name: values})

    # --- Validation ---

    def missing_required(self, fields: dict[str, Any], *, partial: bool = False) -> list[str]:
        """Required fields that are absent or blank.

        With partial=True (updates) only fields present in the payload are checked,
        so an update may omit a required field but may not blank it.
        """
        missing = []
        for name in self.required:
            if partial and name not in fields:
                continue
            if _is_empty(fields.get(name)):
                missing.append(name)
        return missing

    def prepare_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Coerce and validate a create payload. Raises ValidationError."""
        return self._prepare(fields, partial=False)

    def prepare_update(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Coerce and validate an update payload. Raises ValidationError."""
        if self.mutable_fields is not None:
            frozen = sorted(
                k for k in fields if k not in SYSTEM_FIELDS and k not in self.mutable_fields
            )
            if frozen:
                raise ValidationError(
                    invalid_fields=frozen,
                    message=f"{self.name} only allows changes to: {', '.join(self.mutable_fields)}",
                )
        return self._prepare(fields, partial=True)

    def _prepare(self, fields: dict[str, Any], *, partial: bool) -> dict[str, Any]:
        data = {k: v for k, v in fields.items() if k not in SYSTEM_FIELDS}

        unknown = sorted(k for k in data if k not in self.writable_fields)
        if unknown:
            raise ValidationError(invalid_fields=unknown)

        missing = self.missing_required(data, partial=partial)
        if missing:
            raise ValidationError(missing_fields=missing)

        coerced, invalid = self.coerce(data)
        if invalid:
            raise ValidationError(invalid_fields=invalid)

        if coerced.get("current") is True and "end_date" in self.writable_fields:
            coerced["end_date"] = None
        return coerced

    def coerce(self, data: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
        """Apply type coercions. Returns (coerced, invalid_field_names)."""
        out: dict[str, Any] = {}
        invalid: list[str] = []

        for name, value in data.items():
            try:
                if name in self.int_fields:
                    value = self._coerce_int(name, value)
                    if value is None:
                        continue
                elif name in self.bool_fields:
                    value = self._coerce_bool(value)
                elif name in self.date_fields:
                    value = self._coerce_date(value)
                elif name in self.list_fields:
                    value = self._coerce_list(value)
                elif isinstance(value, str):
                    value = value.strip()
            except (TypeError, ValueError):
                invalid.append(name)
                continue

            allowed = self.choices.get(name)
            if allowed is not None and value not in allowed:
                invalid.append(name)
                continue
            out[name] = value

        return out, invalid

    def _coerce_int(self, name: str, value: Any) -> int | None:
        if isinstance(value, bool):
            raise TypeError(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        number = int(value)
        bounds = self.int_ranges.get(name)
        if bounds and not bounds[0] <= number <= bounds[1]:
            raise ValueError(name)
        return number

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
        if isinstance(value, int):
            return bool(value)
        raise ValueError(value)

    @staticmethod
    def _coerce_date(value: Any) -> date | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value).strip()[:10])

    @staticmethod
    def _coerce_list(value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return split_csv(value)
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError(value)

    # --- Row mapping ---

    def to_row(self, data: dict[str, Any]) -> dict[str, Any]:
        """Serialize coerced values into store column values."""
        row: dict[str, Any] = {}
        for name, value in data.items():
            if name in self.list_fields:
                row[name] = json.dumps(value or [])
            elif isinstance(value, (datetime, date)):
                row[name] = value.isoformat()
            elif isinstance(value, UUID):
                row[name] = str(value)
            elif isinstance(value, bool):
                row[name] = int(value)
            else:
                row[name] = value
        return row

    def from_row(self, row: dict[str, Any]) -> E:
        """Build the entity model from a store row."""
        data = dict(row)
        for name in self.list_fields:
            raw = data.get(name)
            if isinstance(raw, str):
                data[name] = json.loads(raw) if raw.startswith("[") else split_csv(raw)
            elif raw is None:
                data[name] = []
        for name in self.bool_fields:
            if data.get(name) is not None:
                data[name] = bool(data[name])
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            bad = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise ValidationError(
                invalid_fields=bad, message=f"Stored {self.name} row is malformed: {e}"
            ) from e


# --- Registry ---

PROFILE = EntitySchema(
    name="profile",
    table="profiles",
    model=Profile,
    int_fields=("display_order",),
)

PROJECT = EntitySchema(
    name="project",
    table="projects",
    model=Project,
    required=("title", "description"),
    int_fields=("display_order",),
    bool_fields=("featured",),
    list_fields=("technologies",),
)

SKILL = EntitySchema(
    name="skill",
    table="skills",
    model=Skill,
    required=("name", "category"),
    int_fields=("display_order", "proficiency_level"),
    int_ranges={"proficiency_level": (1, 5)},
)

WORK_EXPERIENCE = EntitySchema(
    name="work_experience",
    table="work_experiences",
    model=WorkExperience,
    required=("company", "title", "start_date"),
    int_fields=("display_order",),
    bool_fields=("current",),
    date_fields=("start_date", "end_date"),
)

EDUCATION = EntitySchema(
    name="education",
    table="education",
    model=Education,
    required=("institution", "degree"),
    int_fields=("display_order",),
    bool_fields=("current",),
    date_fields=("start_date", "end_date"),
)

CERTIFICATE = EntitySchema(
    name="certificate",
    table="certificates",
    model=Certificate,
    required=("title", "issuer"),
    int_fields=("display_order",),
    date_fields=("issue_date", "expiry_date"),
)

REFERENCE = EntitySchema(
    name="reference",
    table="references",
    model=Reference,
    required=("name", "title", "company"),
    int_fields=("display_order",),
)

CONTACT_MESSAGE = EntitySchema(
    name="contact_message",
    table="contact_messages",
    model=ContactMessage,
    required=("name", "email", "message"),
    bool_fields=("read",),
    mutable_fields=("read",),
    owned=False,
    default_order=(("created_at", False),),
)

SCHEMAS: dict[str, EntitySchema[Any]] = {
    s.table: s
    for s in (
        PROFILE,
        PROJECT,
        SKILL,
        WORK_EXPERIENCE,
        EDUCATION,
        CERTIFICATE,
        REFERENCE,
        CONTACT_MESSAGE,
    )
}


def get_schema(table: str) -> EntitySchema[Any]:
    """Look up a schema by table name. Raises KeyError for unknown tables."""
    return SCHEMAS[table]
