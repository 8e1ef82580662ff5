"""Pydantic schemas used across the store API."""
from datetime import date, datetime, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

LevelLabel = Literal[
    "Trainee",
    "Aprendiz",
    "Recreador(a)",
    "Recreador(a) Experiente",
    "Coordenador(a)",
]
WorkDayTypeLabel = Literal["Dia Comum", "Dia de Festa"]


class Token(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class TokenData(BaseModel):
    """Information encoded into JWTs."""

    username: str
    user_id: int


class UserLogin(BaseModel):
    """Credentials supplied during login."""

    username: str
    password: str


class UserCreate(UserLogin):
    """Payload for user registration."""

    email: EmailStr | None = None


class UserRead(BaseModel):
    """Public representation of a user."""

    id: int
    username: str
    email: EmailStr | None = Field(default=None)

    model_config = ConfigDict(from_attributes=True)


class _Document(BaseModel):
    """Documents travel with camelCase keys, as stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkDayDocument(_Document):
    """One priced work day embedded in an employee document."""

    id: str
    date: date
    type: WorkDayTypeLabel
    value: float
    extra_hours: int | None = Field(default=None, ge=0)


class EmployeeBase(_Document):
    """Scalar fields shared by create and read payloads."""

    name: str = Field(min_length=1)
    artistic_name: str = ""
    level: LevelLabel
    daily_rate: float = Field(default=0.0, ge=0)
    party_rate: float = Field(default=0.0, ge=0)
    extra_hour_rate: float = Field(default=0.0, ge=0)


class EmployeeCreate(EmployeeBase):
    """Employee payload for creation; work days always start empty."""

    artistic_name: str = Field(min_length=1)


class EmployeeUpdate(_Document):
    """Partial merge: any subset of scalar fields and/or the whole work-day array."""

    name: str | None = Field(default=None, min_length=1)
    artistic_name: str | None = Field(default=None, min_length=1)
    level: LevelLabel | None = None
    daily_rate: float | None = Field(default=None, ge=0)
    party_rate: float | None = Field(default=None, ge=0)
    extra_hour_rate: float | None = Field(default=None, ge=0)
    work_days: list[WorkDayDocument] | None = None

    @field_validator("work_days")
    @classmethod
    def one_work_day_per_date(
        cls, value: list[WorkDayDocument] | None
    ) -> list[WorkDayDocument] | None:
        if value is None:
            return value
        seen: set[date] = set()
        for work_day in value:
            if work_day.date in seen:
                raise ValueError(f"duplicate work day for {work_day.date.isoformat()}")
            seen.add(work_day.date)
        return value


class EmployeeRead(EmployeeBase):
    """Employee document returned by the API and pushed in snapshots."""

    id: str
    work_days: list[WorkDayDocument] = Field(default_factory=list)


def compute_expiry(minutes: int) -> datetime:
    """Return an absolute expiration timestamp for tokens."""

    return datetime.now(timezone.utc) + timedelta(minutes=minutes)
