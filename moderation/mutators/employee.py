"""Employee mutator with employment history handling."""

import logging
from datetime import date
from typing import Any, Mapping, Optional

from moderation.core.workflow.records import ItemType
from moderation.db.models import Employee, EmploymentHistory, Establishment

from .base import BaseMutator, EntityNotFoundError

logger = logging.getLogger(__name__)

# Freelancers may keep working at nightclubs; every other current job ends.
FREELANCE_COMPATIBLE_CATEGORY = "Nightclub"


class EmployeeMutator(BaseMutator):
    """Applies employee edits.

    ``current_establishment_id`` is not a column: it moves the employee's
    current employment. Switching ``is_freelance`` on ends every current
    job outside nightclubs.
    """

    item_type = ItemType.EMPLOYEE
    model = Employee
    writable_fields = frozenset({
        "name",
        "nickname",
        "age",
        "nationality",
        "description",
        "photos",
        "social_media",
        "is_freelance",
    })
    extra_fields = frozenset({"current_establishment_id"})

    def _apply_extra(self, entity: Employee, changes: Mapping[str, Any]) -> None:
        if "current_establishment_id" in changes:
            self._move_employment(entity, changes["current_establishment_id"])
        if changes.get("is_freelance") is True:
            self._end_non_freelance_jobs(entity)

    def _current_jobs(self, employee: Employee) -> list:
        return (
            self.db.query(EmploymentHistory)
            .filter(
                EmploymentHistory.employee_id == employee.id,
                EmploymentHistory.is_current.is_(True),
            )
            .all()
        )

    def _move_employment(self, employee: Employee, establishment_id: Optional[str]) -> None:
        current = self._current_jobs(employee)
        if establishment_id and any(job.establishment_id == establishment_id for job in current):
            return

        if establishment_id:
            establishment = (
                self.db.query(Establishment).filter(Establishment.id == establishment_id).first()
            )
            if establishment is None:
                raise EntityNotFoundError(ItemType.ESTABLISHMENT, establishment_id)

        for job in current:
            self._end_job(job)

        if establishment_id:
            self.db.add(EmploymentHistory(
                employee_id=employee.id,
                establishment_id=establishment_id,
                start_date=date.today(),
                is_current=True,
            ))
            self.db.flush()
            logger.info(f"Employee {employee.id} now works at {establishment_id}")
        else:
            logger.info(f"Employee {employee.id} has no current establishment")

    def _end_non_freelance_jobs(self, employee: Employee) -> None:
        for job in self._current_jobs(employee):
            category = job.establishment.category if job.establishment else None
            if category != FREELANCE_COMPATIBLE_CATEGORY:
                self._end_job(job)
                logger.info(
                    f"Ended employment of freelance employee {employee.id} at {job.establishment_id}"
                )

    @staticmethod
    def _end_job(job: EmploymentHistory) -> None:
        job.is_current = False
        job.end_date = date.today()
