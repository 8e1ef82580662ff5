"""Checks run on the employee form before anything is written."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from .models import Employee, EmployeeFields


class EmployeeValidationError(ValueError):
    """The form cannot be saved as entered; ``field`` names the culprit."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


def parse_money(text: Union[str, int, float, Decimal, None], field: str = "rate") -> Decimal:
    """Read a rate typed as ``150``, ``150.5``, ``150,50`` or ``1.234,56``.

    Blank input means zero. Raises ``EmployeeValidationError`` on anything
    else that is not a non-negative number.
    """
    if text is None:
        return Decimal("0")
    if isinstance(text, Decimal):
        value = text
    elif isinstance(text, (int, float)):
        value = Decimal(str(text))
    else:
        raw = text.strip().replace("R$", "").replace(" ", "")
        if not raw:
            return Decimal("0")
        if "," in raw:
            raw = raw.replace(".", "").replace(",", ".")
        try:
            value = Decimal(raw)
        except InvalidOperation as exc:
            raise EmployeeValidationError(f"Valor inválido para {field}: {text!r}", field) from exc
    if not value.is_finite() or value < 0:
        raise EmployeeValidationError(f"Valor inválido para {field}: {text!r}", field)
    return value


def artistic_name_taken(
    artistic_name: str, roster: Iterable[Employee], editing_id: Optional[str] = None
) -> bool:
    wanted = artistic_name.strip().casefold()
    if not wanted:
        return False
    return any(
        e.artistic_name.strip().casefold() == wanted
        for e in roster
        if e.id != editing_id
    )


def validate_employee(
    fields: EmployeeFields, roster: Iterable[Employee], editing_id: Optional[str] = None
) -> EmployeeFields:
    """Return ``fields`` normalised, or raise ``EmployeeValidationError``.

    ``editing_id`` is the employee being edited, so it does not clash with
    its own artistic name.
    """
    name = fields.name.strip()
    if not name:
        raise EmployeeValidationError("O nome é obrigatório.", "name")
    for field in ("daily_rate", "party_rate", "extra_hour_rate"):
        if getattr(fields, field) < 0:
            raise EmployeeValidationError(f"{field} não pode ser negativo.", field)
    artistic_name = fields.artistic_name.strip()
    if not artistic_name:
        raise EmployeeValidationError("O nome artístico é obrigatório.", "artistic_name")
    if artistic_name_taken(artistic_name, roster, editing_id):
        raise EmployeeValidationError(
            f"Já existe um funcionário com o nome artístico '{artistic_name}'.",
            "artistic_name",
        )
    return fields.model_copy(update={"name": name, "artistic_name": artistic_name})
