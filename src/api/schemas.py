from typing import Any

from pydantic import BaseModel


# --- Auth ---
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: str | None = None


class SignUpRequest(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str | None = None


class PasswordResetRequest(BaseModel):
    email: str = ""
    redirect_to: str | None = None


class PasswordResetConfirmRequest(BaseModel):
    token: str = ""
    password: str = ""


class MeResponse(BaseModel):
    account_id: str
    email: str
    expires_at: str


# --- Owner gate ---
class OwnerStatusResponse(BaseModel):
    canSignup: bool
    userCount: int


# --- Public ---
class ContactRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    subject: str | None = None
    message: str | None = None


# --- Admin ---
class ReadFlagRequest(BaseModel):
    read: bool = True


class MutationResponse(BaseModel):
    table: str
    entity: dict[str, Any] | None
    items: list[dict[str, Any]]
    deleted: bool = False
