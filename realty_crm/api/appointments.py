"""
Appointment API endpoints.

The day planner plus add/toggle/remove.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
import logging

from realty_crm.api.deps import get_commands, get_view_state
from realty_crm.core.errors import ValidationFailure
from realty_crm.schemas.appointment import Appointment, AppointmentCreate, today_iso
from realty_crm.schemas.common import normalize_iso_date
from realty_crm.schemas.views import AppointmentView
from realty_crm.services.commands import CommandHandlers
from realty_crm.services.derivations import appointments_for_day
from realty_crm.services.view_state import ViewStateStore, contact_name

router = APIRouter(
    prefix="/api/appointments",
    tags=["appointments"]
)

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[AppointmentView])
async def day_view(
    date: Optional[str] = None,
    view_state: ViewStateStore = Depends(get_view_state),
):
    """
    Every appointment on `date` (YYYY-MM-DD, default today in UTC).

    Completed appointments are included. High priority first, then by
    title.
    """
    try:
        selected = normalize_iso_date(date) if date else today_iso()
    except ValueError as e:
        raise ValidationFailure(str(e)) from e

    snapshot = view_state.snapshot
    return [
        AppointmentView(**a.model_dump(), contact_name=contact_name(snapshot, a.contact_id))
        for a in appointments_for_day(snapshot.appointments, selected)
    ]


@router.post("/", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def add_appointment(
    data: AppointmentCreate,
    commands: CommandHandlers = Depends(get_commands),
):
    return commands.add_appointment(data)


@router.post("/{appointment_id}/toggle")
async def toggle_appointment(
    appointment_id: str,
    commands: CommandHandlers = Depends(get_commands),
):
    completed = commands.toggle_appointment(appointment_id)
    return {"id": appointment_id, "completed": completed}


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_appointment(
    appointment_id: str,
    commands: CommandHandlers = Depends(get_commands),
):
    commands.remove_appointment(appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
