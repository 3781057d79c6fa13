from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import Identity
from ...api.deps import (
    get_appointment_reader, get_appointment_writer, get_appointment_remover
)
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentDraft, AppointmentResponse, AppointmentCreated,
    AppointmentUpdated, AppointmentDeleted
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("", response_model=List[AppointmentResponse])
def list_appointments(
    on_date: Optional[date] = Query(None, alias="date"),
    employee: Optional[str] = None,
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    _: Optional[Identity] = Depends(get_appointment_reader)
):
    """List appointments by date, then time."""
    service = AppointmentService(db)
    return service.list_appointments(on_date=on_date, employee=employee, order=order)

@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: Optional[Identity] = Depends(get_appointment_reader)
):
    return AppointmentService(db).get_appointment(appointment_id)

@router.post("", response_model=AppointmentCreated, status_code=status.HTTP_201_CREATED)
def create_appointment(
    draft: AppointmentDraft,
    db: Session = Depends(get_db),
    _: Identity = Depends(get_appointment_writer)
):
    """Book an appointment; 409 if the employee already has that slot."""
    service = AppointmentService(db)
    return AppointmentCreated(id=service.create_appointment(draft))

@router.put("/{appointment_id}", response_model=AppointmentUpdated)
def update_appointment(
    appointment_id: int,
    draft: AppointmentDraft,
    db: Session = Depends(get_db),
    _: Identity = Depends(get_appointment_writer)
):
    service = AppointmentService(db)
    service.update_appointment(appointment_id, draft)
    return AppointmentUpdated()

@router.delete("/{appointment_id}", response_model=AppointmentDeleted)
def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(get_appointment_remover)
):
    service = AppointmentService(db)
    service.delete_appointment(appointment_id)
    return AppointmentDeleted()
