"""Pydantic models describing the identity lookup payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_blank(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    return value


class ApisunatBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AddressPayload(ApisunatBaseModel):
    line: str = Field(default="", alias="direccion")
    district: str = Field(default="", alias="distrito")
    province: str = Field(default="", alias="provincia")
    department: str = Field(default="", alias="departamento")
    geo_code: str = Field(default="", alias="ubigeo")

    _normalize = field_validator(
        "line", "district", "province", "department", "geo_code", mode="before"
    )(_none_to_blank)


class PersonPayload(ApisunatBaseModel):
    identifier: str = Field(default="", alias="dni")
    given_name: str = Field(default="", alias="nombre")
    paternal_surname: str = Field(default="", alias="apellido_paterno")
    maternal_surname: str = Field(default="", alias="apellido_materno")
    address: AddressPayload = Field(default_factory=AddressPayload, alias="domicilio")

    _normalize = field_validator(
        "identifier", "given_name", "paternal_surname", "maternal_surname", mode="before"
    )(_none_to_blank)

    @field_validator("address", mode="before")
    @classmethod
    def _default_address(cls, value: object) -> object:
        return {} if value is None else value


class LookupResponse(ApisunatBaseModel):
    success: bool
    data: PersonPayload | None = None
    source: int = 0

    @field_validator("source", mode="before")
    @classmethod
    def _default_source(cls, value: object) -> object:
        return 0 if value is None else value
