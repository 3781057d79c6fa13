from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.appointment import Appointment
from ..core.errors import Conflict, NotFound
from ..schemas.appointment import AppointmentDraft

logger = logging.getLogger(__name__)

SLOT_TAKEN = "An appointment already exists for that employee at that time"

class AppointmentService:
    """The appointment ledger.

    Owns every write to the ``appointments`` table and the rule that an
    employee holds at most one appointment per (date, time) slot. The
    pre-check gives a clean error in the common case; the
    ``uq_appointments_slot`` constraint settles concurrent writers, and its
    violation is reported as the same ``Conflict``.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_appointments(
        self,
        on_date: Optional[date] = None,
        employee: Optional[str] = None,
        order: str = "asc",
    ) -> List[Appointment]:
        """Snapshot of appointments ordered by date then time.

        ``order="desc"`` reverses the date direction only; times within a day
        stay ascending.
        """
        query = self.db.query(Appointment)
        if on_date is not None:
            query = query.filter(Appointment.date == on_date)
        if employee is not None:
            query = query.filter(Appointment.employee == employee)

        date_order = Appointment.date.desc() if order == "desc" else Appointment.date.asc()
        return query.order_by(date_order, Appointment.time.asc(), Appointment.id.asc()).all()

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFound(f"Appointment {appointment_id} not found")
        return appointment

    def create_appointment(self, draft: AppointmentDraft) -> int:
        """Book a slot and return the new appointment id."""
        if self._find_slot_holder(draft.date, draft.time, draft.employee) is not None:
            logger.info(f"Rejected booking for {draft.employee} at {draft.date} {draft.time}: slot taken")
            raise Conflict(SLOT_TAKEN)

        appointment = Appointment(**draft.model_dump())
        self.db.add(appointment)
        self._commit_slot(draft)
        self.db.refresh(appointment)

        logger.info(f"Booked appointment {appointment.id} for {draft.employee} at {draft.date} {draft.time}")
        return appointment.id

    def update_appointment(self, appointment_id: int, draft: AppointmentDraft) -> Appointment:
        """Replace every mutable field; the new slot must be free of other bookings."""
        appointment = self.get_appointment(appointment_id)

        holder = self._find_slot_holder(
            draft.date, draft.time, draft.employee, exclude_id=appointment_id
        )
        if holder is not None:
            logger.info(f"Rejected edit of appointment {appointment_id}: slot held by {holder.id}")
            raise Conflict(SLOT_TAKEN)

        for field, value in draft.model_dump().items():
            setattr(appointment, field, value)
        self._commit_slot(draft, exclude_id=appointment_id)
        self.db.refresh(appointment)

        logger.info(f"Updated appointment {appointment_id}")
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"Deleted appointment {appointment_id}")

    def _find_slot_holder(
        self,
        on_date: date,
        time: str,
        employee: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[Appointment]:
        query = self.db.query(Appointment).filter(
            Appointment.date == on_date,
            Appointment.time == time,
            Appointment.employee == employee,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.first()

    def _commit_slot(self, draft: AppointmentDraft, exclude_id: Optional[int] = None) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Lost a race for the slot, or some other constraint failed
            if self._find_slot_holder(draft.date, draft.time, draft.employee, exclude_id) is not None:
                logger.info(f"Concurrent booking won slot {draft.employee} at {draft.date} {draft.time}")
                raise Conflict(SLOT_TAKEN)
            raise
