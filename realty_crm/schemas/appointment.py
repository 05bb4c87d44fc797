"""
Appointment schemas.

These handle agenda entries: strict record plus the create payload.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from realty_crm.db.models import Priority
from realty_crm.schemas.common import (
    coerce_id,
    coerce_reference,
    normalize_iso_date,
    parse_priority,
    require_text,
)


def today_iso() -> str:
    """Today's UTC calendar date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


class Appointment(BaseModel):
    """
    An appointment as stored by the backend.

    Legacy spellings accepted: titulo, concluido, prioridade
    (Baixa/Média/Alta), cliente_id, data_compromisso.
    """

    id: str
    title: str = Field(validation_alias=AliasChoices("title", "titulo"))
    completed: bool = Field(False, validation_alias=AliasChoices("completed", "concluido"))
    priority: Priority = Field(validation_alias=AliasChoices("priority", "prioridade"))
    contact_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("contact_id", "cliente_id")
    )
    scheduled_date: str = Field(
        validation_alias=AliasChoices("scheduled_date", "data_compromisso")
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> Any:
        return coerce_id(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> Any:
        return parse_priority(v)

    @field_validator("contact_id", mode="before")
    @classmethod
    def _reference(cls, v: Any) -> Optional[str]:
        return coerce_reference(v)

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> str:
        return normalize_iso_date(v)


class AppointmentCreate(BaseModel):
    """
    Schema for adding an appointment.

    Defaults match a fresh form: Medium priority, pending, today (UTC).
    """

    title: str = Field(validation_alias=AliasChoices("title", "titulo"))
    completed: bool = Field(False, validation_alias=AliasChoices("completed", "concluido"))
    priority: Priority = Field(
        Priority.MEDIUM, validation_alias=AliasChoices("priority", "prioridade")
    )
    contact_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("contact_id", "cliente_id")
    )
    scheduled_date: str = Field(
        default_factory=today_iso,
        validation_alias=AliasChoices("scheduled_date", "data_compromisso"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return require_text(v, "O título do compromisso é obrigatório.").strip()

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> Any:
        return parse_priority(v)

    @field_validator("contact_id", mode="before")
    @classmethod
    def _reference(cls, v: Any) -> Optional[str]:
        return coerce_reference(v)

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> str:
        return normalize_iso_date(v)
