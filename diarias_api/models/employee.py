"""Employee document with its embedded work days."""
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, OwnedMixin


def _new_document_id() -> str:
    return uuid4().hex


class Employee(OwnedMixin, Base):
    """One staff member; `work_days` is stored inline and replaced as a whole."""

    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_document_id)
    name: Mapped[str] = mapped_column(String)
    artistic_name: Mapped[str] = mapped_column(String, default="")
    level: Mapped[str] = mapped_column(String)
    daily_rate: Mapped[float] = mapped_column(Float, default=0.0)
    party_rate: Mapped[float] = mapped_column(Float, default=0.0)
    extra_hour_rate: Mapped[float] = mapped_column(Float, default=0.0)
    work_days: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    __table_args__ = (
        Index("ix_emp_owner_name", "owner_id", "name"),
    )
