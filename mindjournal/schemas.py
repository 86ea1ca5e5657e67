import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------------------------------------------------------------------------
# Journal Schemas
# ---------------------------------------------------------------------------
class JournalCreate(BaseModel):
    content: str = Field(..., description="Free-text journal entry; must not be blank")


class JournalOut(CamelModel):
    id: str = Field(..., description="Opaque identifier of the journal entry")
    owner_id: str = Field(..., description="Identifier of the user who wrote the entry")
    content: str = Field(..., description="Trimmed entry text")
    emotion: str = Field(..., description="Inferred emotion label, or 'neutral' when AI is unavailable")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Score of the emotion label")
    suggestion: str = Field(..., description="Coping suggestion for the entry")
    created_at: datetime = Field(..., description="Timestamp when the entry was stored (UTC)")

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class AIStatus(CamelModel):
    emotion_classification: bool = Field(..., description="Whether emotion classification calls a live model")
    coping_suggestions: bool = Field(..., description="Whether coping suggestions call a live model")


# ---------------------------------------------------------------------------
# Auth Schemas
# ---------------------------------------------------------------------------
class UserRegister(CamelModel):
    username: str = Field(..., min_length=3, max_length=30, description="Letters, numbers and underscores")
    email: EmailStr
    password: str = Field(..., min_length=8, description="At least 8 characters with a digit, a lowercase and an uppercase letter")
    confirm_password: str = Field(..., description="Must match password")

    @field_validator("username")
    @classmethod
    def _username_chars(cls, value: str) -> str:
        value = value.strip()
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return value

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "UserRegister":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: str
    username: str
    email: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class TokenResponse(BaseModel):
    status: str = Field(default="success")
    token: str = Field(..., description="Bearer token; also set as the 'jwt' cookie")
    user: UserOut


class MeResponse(BaseModel):
    status: str = Field(default="success")
    user: UserOut


class StatusResponse(BaseModel):
    status: str = Field(default="success")
    message: Optional[str] = None
