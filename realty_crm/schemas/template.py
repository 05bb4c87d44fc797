"""
Message template and preference schemas.

Templates live only in the local preference store.
"""

from pydantic import BaseModel, Field


class MessageTemplate(BaseModel):
    """A saved quick-send message."""
    id: int
    title: str
    text: str


class TemplateUpdate(BaseModel):
    """Schema for editing a template's text."""
    text: str


class ThemeResponse(BaseModel):
    dark_mode: bool


class ThemeUpdate(BaseModel):
    dark_mode: bool


class WhatsappRequest(BaseModel):
    """Compose a WhatsApp deep link."""
    phone: str
    message: str = Field("", description="Text to pre-fill in the chat")
