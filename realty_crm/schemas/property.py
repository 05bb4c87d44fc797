"""
Property listing schemas.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from realty_crm.db.models import PropertyCategory
from realty_crm.schemas.common import coerce_id, coerce_text, parse_category, require_text


class Property(BaseModel):
    """
    A listing as stored by the backend.

    Legacy spellings accepted: titulo, endereco, valor, link_externo,
    url_foto, tipo (Apartamento/Casa/Terreno/Comercial/Outro).
    """

    id: str
    title: str = Field(validation_alias=AliasChoices("title", "titulo"))
    address: str = Field(validation_alias=AliasChoices("address", "endereco"))
    price: float = Field(0, ge=0, validation_alias=AliasChoices("price", "valor"))
    listing_url: str = Field("", validation_alias=AliasChoices("listing_url", "link_externo"))
    photo_url: str = Field("", validation_alias=AliasChoices("photo_url", "url_foto"))
    category: PropertyCategory = Field(validation_alias=AliasChoices("category", "tipo"))

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> Any:
        return coerce_id(v)

    @field_validator("listing_url", "photo_url", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> Any:
        return parse_category(v)


class PropertyCreate(BaseModel):
    """Schema for adding a listing. Title and address are required."""

    title: str = Field(validation_alias=AliasChoices("title", "titulo"))
    address: str = Field(validation_alias=AliasChoices("address", "endereco"))
    price: float = Field(0, ge=0, validation_alias=AliasChoices("price", "valor"))
    listing_url: str = Field("", validation_alias=AliasChoices("listing_url", "link_externo"))
    photo_url: str = Field("", validation_alias=AliasChoices("photo_url", "url_foto"))
    category: PropertyCategory = Field(
        PropertyCategory.APARTMENT, validation_alias=AliasChoices("category", "tipo")
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return require_text(v, "O título do imóvel é obrigatório.").strip()

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return require_text(v, "O endereço do imóvel é obrigatório.").strip()

    @field_validator("listing_url", "photo_url", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> Any:
        return parse_category(v)
