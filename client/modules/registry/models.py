"""
Registry module data models.

Field aliases follow the ReceitaWS response body.
"""

from typing import Optional

from pydantic import BaseModel, Field


ACTIVE_STATUS = "ATIVA"


class CompanyInfo(BaseModel):
    """Company registration data returned by a CNPJ lookup."""

    cnpj: str
    legal_name: str = Field("", alias="nome")
    trade_name: Optional[str] = Field(None, alias="fantasia")
    registration_status: Optional[str] = Field(None, alias="situacao")
    street: Optional[str] = Field(None, alias="logradouro")
    number: Optional[str] = Field(None, alias="numero")
    complement: Optional[str] = Field(None, alias="complemento")
    neighborhood: Optional[str] = Field(None, alias="bairro")
    city: Optional[str] = Field(None, alias="municipio")
    state: Optional[str] = Field(None, alias="uf")
    cep: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = Field(None, alias="telefone")

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @property
    def is_active(self) -> bool:
        return (self.registration_status or "").upper() == ACTIVE_STATUS

    def formatted_address(self) -> str:
        """Single-line address, e.g. "Rua A, 10 - Sala 2, Centro, Recife - PE, CEP: 50000-000"."""
        street = ", ".join(part for part in (self.street, self.number) if part)
        if self.complement:
            street = f"{street} - {self.complement}"
        city = " - ".join(part for part in (self.city, self.state) if part)
        parts = [part for part in (street, self.neighborhood, city) if part]
        if self.cep:
            parts.append(f"CEP: {self.cep}")
        return ", ".join(parts)
