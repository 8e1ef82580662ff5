"""Employee document endpoints for the roster store."""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_current_user, get_db_session, get_owned_employee
from ..models import Employee, User
from ..schemas import EmployeeCreate, EmployeeRead, EmployeeUpdate
from ..websocket_manager import roster_feed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])

_SCALAR_COLUMNS = (
    "name",
    "artistic_name",
    "level",
    "daily_rate",
    "party_rate",
    "extra_hour_rate",
)


def employee_document(employee: Employee) -> Dict[str, Any]:
    """Serialise a row the way clients store it: camelCase keys, inline work days."""

    return EmployeeRead(
        id=employee.id,
        name=employee.name,
        artistic_name=employee.artistic_name,
        level=employee.level,
        daily_rate=employee.daily_rate,
        party_rate=employee.party_rate,
        extra_hour_rate=employee.extra_hour_rate,
        work_days=list(employee.work_days or []),
    ).model_dump(mode="json", by_alias=True, exclude_none=True)


async def roster_documents(session: AsyncSession, owner_id: int) -> List[Dict[str, Any]]:
    """Every employee document of one owner."""

    result = await session.execute(
        select(Employee).where(Employee.owner_id == owner_id).order_by(Employee.name)
    )
    return [employee_document(row) for row in result.scalars().all()]


async def publish_roster(session: AsyncSession, owner_id: int) -> None:
    await roster_feed.publish_snapshot(owner_id, await roster_documents(session, owner_id))


@router.get("/", response_model=list[EmployeeRead])
async def list_employees(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> List[Dict[str, Any]]:
    """Return the authenticated user's roster."""

    return await roster_documents(session, current_user.id)


@router.post("/", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    """Create an employee in the caller's roster with no work days."""

    employee = Employee(
        owner_id=current_user.id,
        name=payload.name,
        artistic_name=payload.artistic_name,
        level=payload.level,
        daily_rate=payload.daily_rate,
        party_rate=payload.party_rate,
        extra_hour_rate=payload.extra_hour_rate,
        work_days=[],
    )
    session.add(employee)
    await session.commit()
    await session.refresh(employee)
    logger.info("Created employee %s for user %s", employee.id, current_user.id)

    document = employee_document(employee)
    await publish_roster(session, current_user.id)
    return document


@router.get("/{employee_id}", response_model=EmployeeRead)
async def get_employee(employee: Employee = Depends(get_owned_employee)) -> Dict[str, Any]:
    """Return one employee document."""

    return employee_document(employee)


@router.patch("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    payload: EmployeeUpdate,
    employee: Employee = Depends(get_owned_employee),
    session: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    """Merge the supplied fields into the stored document.

    ``workDays``, when present, replaces the embedded array wholesale.
    """

    changes = payload.model_dump(exclude_unset=True)
    for column in _SCALAR_COLUMNS:
        if column in changes and changes[column] is not None:
            setattr(employee, column, changes[column])
    if payload.work_days is not None:
        employee.work_days = [
            work_day.model_dump(mode="json", by_alias=True, exclude_none=True)
            for work_day in payload.work_days
        ]

    await session.commit()
    await session.refresh(employee)
    logger.info(
        "Updated employee %s (%s)", employee.id, ", ".join(sorted(changes)) or "no fields"
    )

    document = employee_document(employee)
    await publish_roster(session, employee.owner_id)
    return document


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee: Employee = Depends(get_owned_employee),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Remove the employee together with its embedded work days."""

    owner_id = employee.owner_id
    employee_id = employee.id
    await session.delete(employee)
    await session.commit()
    logger.info("Deleted employee %s of user %s", employee_id, owner_id)

    await publish_roster(session, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
