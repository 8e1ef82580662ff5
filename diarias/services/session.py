"""
Application session: the signed-in client, its roster adapter and the
current roster as last delivered by the store.

A UI (or the CLI) creates one ``RosterSession`` at startup and passes it
around; there are no module-level handles.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Union

from ..core.day_selection import MonthDraft
from ..core.export import export_month
from ..core.models import Employee, EmployeeFields
from ..core.months import Month
from ..core.reconcile import DateKey, DaySelection, reconcile, remove_work_day
from ..core.validation import validate_employee
from .api_client import APIClient, APIError
from .roster_store import ReplaceWorkDays, RosterStore, SetScalarFields

logger = logging.getLogger(__name__)

Listener = Callable[[List[Employee]], None]


class UnknownEmployeeError(LookupError):
    """The id is not part of the roster currently held by the session."""


class RosterCell:
    """Read-only view of the latest roster; each delivery replaces it whole."""

    def __init__(self) -> None:
        self._employees: List[Employee] = []
        self._by_id: Dict[str, Employee] = {}
        self.version = 0
        self._listeners: List[Listener] = []

    @property
    def employees(self) -> List[Employee]:
        return list(self._employees)

    def get(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def listen(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def replace(self, employees: List[Employee]) -> None:
        self._employees = list(employees)
        self._by_id = {e.id: e for e in self._employees}
        self.version += 1
        for listener in list(self._listeners):
            listener(self.employees)

    def clear(self) -> None:
        self.replace([])


class RosterSession:
    """Everything one signed-in user works with for the lifetime of the app."""

    def __init__(self, client: Optional[APIClient] = None) -> None:
        self.client = client or APIClient()
        self.store = RosterStore(self.client)
        self.roster = RosterCell()
        self._subscription: Optional[asyncio.Task] = None
        self.subscription_error: Optional[APIError] = None

    # ---- auth ----

    @property
    def signed_in(self) -> bool:
        return self.client.has_token()

    async def sign_in(self, username: str, password: str) -> None:
        await self.client.login(username=username, password=password)

    async def sign_out(self) -> None:
        """Stop following the store and forget the roster."""
        try:
            await self.stop()
        finally:
            self.client.clear_token()
            self.roster.clear()
            logger.info("Signed out; roster cleared")

    async def close(self) -> None:
        try:
            await self.stop()
        finally:
            await self.client.close()

    # ---- reads ----

    def start(self) -> asyncio.Task:
        """Follow the store's snapshots in the background.

        A failed earlier subscription is replaced; its error stays available
        in ``subscription_error`` until the new one starts.
        """
        previous = self._subscription
        if previous is not None and not previous.done():
            return previous
        if previous is not None and not previous.cancelled():
            previous.exception()
        self._subscription = asyncio.create_task(self._follow())
        return self._subscription

    async def stop(self) -> None:
        """Cancel the subscription, or re-raise the error it already ended with."""
        task, self._subscription = self._subscription, None
        if task is None:
            return
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        elif not task.cancelled():
            task.result()

    async def _follow(self) -> None:
        self.subscription_error = None
        try:
            async for employees in self.store.subscribe():
                self.apply_snapshot(employees)
        except APIError as exc:
            self.subscription_error = exc
            logger.error("Roster subscription ended: %s", exc)
            raise

    def apply_snapshot(self, employees: List[Employee]) -> None:
        self.roster.replace(employees)
        logger.debug("Roster snapshot v%s with %s employees", self.roster.version, len(employees))

    async def refresh(self) -> List[Employee]:
        """Pull the roster once, for callers that do not subscribe."""
        employees = await self.store.fetch()
        self.apply_snapshot(employees)
        return employees

    def employee(self, employee_id: str) -> Employee:
        employee = self.roster.get(employee_id)
        if employee is None:
            raise UnknownEmployeeError(employee_id)
        return employee

    # ---- writes ----

    async def save_employee(self, fields: EmployeeFields, editing_id: Optional[str] = None) -> str:
        """Create (``editing_id`` None) or edit an employee after validating the form.

        Validation failures raise before the store is contacted.
        """
        clean = validate_employee(fields, self.roster.employees, editing_id)
        if editing_id is None:
            return await self.store.create(clean)
        self.employee(editing_id)
        await self.store.replace_fields(editing_id, SetScalarFields(clean))
        return editing_id

    async def save_month(
        self,
        employee_id: str,
        month_selections: Mapping[DateKey, DaySelection],
        month: Month,
    ) -> None:
        """Reconcile the month against the roster as currently known and write it."""
        employee = self.employee(employee_id)
        work_days = reconcile(employee, month_selections, month)
        await self.store.replace_fields(employee_id, ReplaceWorkDays(work_days))

    async def save_draft(self, draft: MonthDraft) -> None:
        """Persist an editor's month; on failure the draft is left as it was."""
        await self.save_month(draft.employee.id, draft.selections(), draft.month)

    async def remove_work_day(self, employee_id: str, day_id: str) -> None:
        employee = self.employee(employee_id)
        await self.store.replace_fields(employee_id, ReplaceWorkDays(remove_work_day(employee, day_id)))

    async def delete_employee(self, employee_id: str) -> None:
        await self.store.delete(employee_id)

    async def export_month(
        self, employee_id: str, month: Month, directory: Union[str, Path] = "."
    ) -> Optional[Path]:
        """Write the spreadsheet off the event loop; ``None`` means nothing to export."""
        employee = self.employee(employee_id)
        return await asyncio.to_thread(export_month, employee, month, directory)
