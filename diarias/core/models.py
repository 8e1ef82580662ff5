"""Typed roster records as the client sees them."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def _to_decimal(value: Any) -> Any:
    # Store numbers arrive as floats; go through str so 150.1 stays 150.1
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(_to_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class Level(str, Enum):
    """Rank labels, declared from lowest to highest."""

    TRAINEE = "Trainee"
    APRENDIZ = "Aprendiz"
    RECREADOR = "Recreador(a)"
    RECREADOR_EXPERIENTE = "Recreador(a) Experiente"
    COORDENADOR = "Coordenador(a)"

    @property
    def rank(self) -> int:
        return list(Level).index(self)


class WorkDayType(str, Enum):
    COMUM = "Dia Comum"
    FESTA = "Dia de Festa"


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkDay(_Document):
    """One priced work event; ``value`` is cached at write time."""

    id: str
    date: date
    type: WorkDayType
    value: Money
    extra_hours: int = Field(default=0, ge=0)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class EmployeeFields(_Document):
    """The scalar, form-editable part of an employee."""

    name: str
    artistic_name: str = ""
    level: Level = Level.TRAINEE
    daily_rate: Money = Decimal("0")
    party_rate: Money = Decimal("0")
    extra_hour_rate: Money = Decimal("0")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Employee(EmployeeFields):
    """A roster entry with its store id and embedded work days."""

    id: str
    work_days: List[WorkDay] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Employee":
        return cls.model_validate(document)

    def fields(self) -> EmployeeFields:
        return EmployeeFields(
            name=self.name,
            artistic_name=self.artistic_name,
            level=self.level,
            daily_rate=self.daily_rate,
            party_rate=self.party_rate,
            extra_hour_rate=self.extra_hour_rate,
        )
