"""
Property API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
import logging

from realty_crm.api.deps import get_commands, get_view_state
from realty_crm.core.errors import ValidationFailure
from realty_crm.schemas.property import Property, PropertyCreate
from realty_crm.services.commands import CommandHandlers
from realty_crm.services.derivations import filter_properties, parse_category_filter, parse_price_band
from realty_crm.services.view_state import ViewStateStore

router = APIRouter(
    prefix="/api/properties",
    tags=["properties"]
)

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[Property])
async def list_properties(
    q: str = "",
    category: Optional[str] = None,
    price_band: Optional[str] = None,
    view_state: ViewStateStore = Depends(get_view_state),
):
    """
    Listings matching all given filters, alphabetical by title.

    Args:
        q: Text in title/address, or digits of the price
        category: Apartment, House, Land, Commercial, Other or "all"
        price_band: 100k, 300k, 500k, 1m, 1m+ or "all"
    """
    try:
        selected_category = parse_category_filter(category)
        band = parse_price_band(price_band)
    except ValueError as e:
        raise ValidationFailure(str(e)) from e

    return filter_properties(view_state.snapshot.properties, q, selected_category, band)


@router.post("/", response_model=Property, status_code=status.HTTP_201_CREATED)
async def add_property(
    data: PropertyCreate,
    commands: CommandHandlers = Depends(get_commands),
):
    return commands.add_property(data)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_property(
    property_id: str,
    commands: CommandHandlers = Depends(get_commands),
):
    commands.remove_property(property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
