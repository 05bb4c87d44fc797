"""
Local preference endpoints: message templates, theme and the WhatsApp
composer.
"""

from typing import List

from fastapi import APIRouter, Depends
import logging

from realty_crm.api.deps import get_templates, get_theme
from realty_crm.schemas.template import (
    MessageTemplate,
    TemplateUpdate,
    ThemeResponse,
    ThemeUpdate,
    WhatsappRequest,
)
from realty_crm.schemas.views import WhatsappLinkResponse
from realty_crm.services.messaging import whatsapp_link
from realty_crm.services.preferences import TemplateService, ThemePreference

router = APIRouter(
    prefix="/api",
    tags=["preferences"]
)

logger = logging.getLogger(__name__)


@router.get("/templates", response_model=List[MessageTemplate])
async def list_templates(templates: TemplateService = Depends(get_templates)):
    return templates.list_templates()


@router.put("/templates/{template_id}", response_model=MessageTemplate)
async def update_template(
    template_id: int,
    data: TemplateUpdate,
    templates: TemplateService = Depends(get_templates),
):
    """Replace a template's text. Blank text is rejected with 422."""
    return templates.update_template(template_id, data.text)


@router.get("/preferences/theme", response_model=ThemeResponse)
async def get_theme_preference(theme: ThemePreference = Depends(get_theme)):
    return ThemeResponse(dark_mode=theme.is_dark_mode())


@router.put("/preferences/theme", response_model=ThemeResponse)
async def set_theme_preference(
    data: ThemeUpdate,
    theme: ThemePreference = Depends(get_theme),
):
    return ThemeResponse(dark_mode=theme.set_dark_mode(data.dark_mode))


@router.post("/preferences/theme/toggle", response_model=ThemeResponse)
async def toggle_theme(theme: ThemePreference = Depends(get_theme)):
    return ThemeResponse(dark_mode=theme.toggle())


@router.post("/messages/whatsapp", response_model=WhatsappLinkResponse)
async def compose_whatsapp(data: WhatsappRequest):
    """
    Build a wa.me link for any number.

    Numbers with too few digits are rejected with 422.
    """
    return WhatsappLinkResponse(url=whatsapp_link(data.phone, data.message))
