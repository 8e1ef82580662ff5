"""
Roster store adapter: typed access to one signed-in user's employee
documents.

Reads come only from snapshots pushed by the store; writes are single calls
whose effect becomes visible when the next snapshot arrives. Nothing is
applied locally ahead of the store's confirmation and nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Sequence, Union

from pydantic import ValidationError

from ..core.models import Employee, EmployeeFields, WorkDay
from .api_client import APIClient, APIError

logger = logging.getLogger(__name__)


class StoreWriteError(APIError):
    """The store did not accept a create/update/delete; message is user-facing."""


class SnapshotError(APIError):
    """A pushed snapshot could not be read as a roster."""


@dataclass(frozen=True)
class SetScalarFields:
    """Form edit: overwrite the employee's scalar fields."""

    fields: EmployeeFields

    def payload(self) -> Dict[str, Any]:
        return self.fields.to_document()


@dataclass(frozen=True)
class ReplaceWorkDays:
    """Reconciliation output: the complete new work-day list."""

    work_days: Sequence[WorkDay]

    def payload(self) -> Dict[str, Any]:
        return {"workDays": [wd.to_document() for wd in self.work_days]}


UpdateCommand = Union[SetScalarFields, ReplaceWorkDays]


def parse_roster(documents: List[Dict[str, Any]]) -> List[Employee]:
    try:
        return [Employee.from_document(doc) for doc in documents]
    except ValidationError as exc:
        raise SnapshotError(f"Malformed employee document in snapshot: {exc}") from exc


class RosterStore:
    """Adapter bound to one authenticated client (and therefore one user)."""

    def __init__(self, client: APIClient) -> None:
        self.client = client

    async def subscribe(self) -> AsyncIterator[List[Employee]]:
        """Every yielded list is the whole roster and replaces the previous one."""
        async for documents in self.client.snapshot_stream():
            yield parse_roster(documents)

    async def fetch(self) -> List[Employee]:
        """One-off full read, for callers that do not keep a subscription."""
        return parse_roster(await self.client.list_employees())

    async def create(self, fields: EmployeeFields) -> str:
        """Create an employee (with no work days) and return the store's id."""
        try:
            document = await self.client.create_employee(fields.to_document())
        except APIError as exc:
            logger.error("Creating employee '%s' failed: %s", fields.name, exc)
            raise StoreWriteError(f"Não foi possível salvar o funcionário: {exc}", exc.status_code) from exc
        employee_id = str(document["id"])
        logger.info("Created employee %s", employee_id)
        return employee_id

    async def replace_fields(self, employee_id: str, command: UpdateCommand) -> None:
        """Merge the command's fields into the stored document."""
        try:
            await self.client.update_employee(employee_id, command.payload())
        except APIError as exc:
            logger.error("%s on %s failed: %s", type(command).__name__, employee_id, exc)
            raise StoreWriteError(f"Não foi possível atualizar o funcionário: {exc}", exc.status_code) from exc
        logger.info("%s applied to %s", type(command).__name__, employee_id)

    async def delete(self, employee_id: str) -> None:
        """Remove the employee and every embedded work day."""
        try:
            await self.client.delete_employee(employee_id)
        except APIError as exc:
            logger.error("Deleting %s failed: %s", employee_id, exc)
            raise StoreWriteError(f"Não foi possível excluir o funcionário: {exc}", exc.status_code) from exc
        logger.info("Deleted employee %s", employee_id)
