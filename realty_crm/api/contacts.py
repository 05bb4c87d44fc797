"""
Contact API endpoints.

Search, add, remove, export and the messaging shortcuts for one contact.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse
import logging

from realty_crm.api.deps import get_commands, get_view_state
from realty_crm.core.errors import RecordNotFound, ValidationFailure
from realty_crm.core.logging import with_context
from realty_crm.schemas.contact import Contact, ContactCreate
from realty_crm.schemas.views import ClipboardResponse, ContactView, LinksResponse
from realty_crm.services import messaging
from realty_crm.services.commands import CommandHandlers
from realty_crm.services.data_service import Collection
from realty_crm.services.derivations import filter_contacts
from realty_crm.services.view_state import ViewStateStore, property_title

router = APIRouter(
    prefix="/api/contacts",
    tags=["contacts"]
)

logger = logging.getLogger(__name__)


def _find_contact(view_state: ViewStateStore, contact_id: str) -> Contact:
    contact = view_state.snapshot.find(Collection.CONTACTS, contact_id)
    if contact is None:
        raise RecordNotFound(Collection.CONTACTS.value, contact_id)
    return contact


@router.get("/", response_model=List[ContactView])
async def list_contacts(
    q: str = "",
    view_state: ViewStateStore = Depends(get_view_state),
):
    """
    Contacts matching `q` (name, email or phone), alphabetical by name.

    Each contact carries the title of the property it is interested in,
    or a placeholder when there is none or it was deleted.
    """
    snapshot = view_state.snapshot
    return [
        ContactView(
            **contact.model_dump(),
            interested_property_title=property_title(snapshot, contact.interested_property_id),
        )
        for contact in filter_contacts(snapshot.contacts, q)
    ]


@router.post("/", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def add_contact(
    data: ContactCreate,
    commands: CommandHandlers = Depends(get_commands),
):
    return commands.add_contact(data)


@router.get("/export.csv", response_class=PlainTextResponse)
async def export_contacts(commands: CommandHandlers = Depends(get_commands)):
    """
    Download every contact as CSV.

    Returns 422 when there is nothing to export.
    """
    csv_text = commands.export_contacts()
    filename = messaging.export_filename()
    return Response(
        content=csv_text.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_contact(
    contact_id: str,
    commands: CommandHandlers = Depends(get_commands),
):
    with_context(logger, contact_id=contact_id).info("Removing contact")
    commands.remove_contact(contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{contact_id}/links", response_model=LinksResponse)
async def contact_links(
    contact_id: str,
    view_state: ViewStateStore = Depends(get_view_state),
):
    """
    WhatsApp, dial and email links for a contact.

    A channel the contact cannot be reached on comes back as null.
    """
    contact = _find_contact(view_state, contact_id)
    links = LinksResponse()
    if contact.phone:
        links.dial = messaging.dial_link(contact.phone)
        try:
            links.whatsapp = messaging.whatsapp_link(contact.phone)
        except ValidationFailure:
            links.whatsapp = None
    if contact.email:
        links.email = messaging.email_link(contact)
    return links


@router.get("/{contact_id}/email", response_model=ClipboardResponse)
async def copy_email(
    contact_id: str,
    view_state: ViewStateStore = Depends(get_view_state),
):
    """The contact's email address, ready for the clipboard."""
    contact = _find_contact(view_state, contact_id)
    email = messaging.clipboard_email(contact)
    return ClipboardResponse(
        email=email,
        message=f'O email "{email}" foi copiado para a área de transferência!',
    )
