"""
Contact schemas for validation.

`Contact` is the strict record every derivation works on.
`ContactCreate` is what the agent submits from the form.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from realty_crm.schemas.common import coerce_id, coerce_reference, coerce_text, require_text


class Contact(BaseModel):
    """
    A contact as stored by the backend.

    Accepts both the English field names and the legacy Portuguese
    column names (nome, telefone, imovel_interesse_id).
    """

    id: str
    name: str = Field(validation_alias=AliasChoices("name", "nome"))
    email: str = ""
    phone: str = Field("", validation_alias=AliasChoices("phone", "telefone"))
    interested_property_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("interested_property_id", "imovel_interesse_id"),
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> Any:
        return coerce_id(v)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("interested_property_id", mode="before")
    @classmethod
    def _reference(cls, v: Any) -> Optional[str]:
        return coerce_reference(v)


class ContactCreate(BaseModel):
    """Schema for adding a contact. Only the name is required."""

    name: str = Field(validation_alias=AliasChoices("name", "nome"))
    email: str = ""
    phone: str = Field("", validation_alias=AliasChoices("phone", "telefone"))
    interested_property_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("interested_property_id", "imovel_interesse_id"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_text(v, "O nome do cliente é obrigatório.").strip()

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("interested_property_id", mode="before")
    @classmethod
    def _reference(cls, v: Any) -> Optional[str]:
        return coerce_reference(v)
