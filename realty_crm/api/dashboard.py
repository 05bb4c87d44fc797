"""
Dashboard and reload endpoints.
"""

from fastapi import APIRouter, Depends
import logging

from realty_crm.api.deps import get_view_state
from realty_crm.schemas.views import AppointmentView, DashboardResponse, ReloadResponse
from realty_crm.services.derivations import compute_stats
from realty_crm.services.view_state import ViewStateStore, contact_name

router = APIRouter(
    prefix="/api",
    tags=["dashboard"]
)

logger = logging.getLogger(__name__)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(view_state: ViewStateStore = Depends(get_view_state)):
    """
    Summary counts and the three soonest pending appointments.

    Example response:
        {
            "total_contacts": 12,
            "pending_appointments": 4,
            "pending_by_priority": {"High": 1, "Medium": 2, "Low": 1},
            "upcoming": [...],
            ...
        }
    """
    snapshot = view_state.snapshot
    stats = compute_stats(snapshot.contacts, snapshot.properties, snapshot.appointments)

    return DashboardResponse(
        total_contacts=stats.total_contacts,
        total_properties=stats.total_properties,
        total_appointments=stats.total_appointments,
        pending_appointments=stats.pending_appointments,
        pending_by_priority=stats.pending_by_priority,
        upcoming=[
            AppointmentView(**a.model_dump(), contact_name=contact_name(snapshot, a.contact_id))
            for a in stats.upcoming
        ],
        rejected_records=snapshot.rejected,
        loaded_at=snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
    )


@router.post("/reload", response_model=ReloadResponse)
async def reload(view_state: ViewStateStore = Depends(get_view_state)):
    """Force a full re-fetch of all three collections."""
    logger.info("Manual reload requested")
    snapshot = view_state.reload_all()
    return ReloadResponse(
        contacts=len(snapshot.contacts),
        appointments=len(snapshot.appointments),
        properties=len(snapshot.properties),
        rejected_records=snapshot.rejected,
    )
