"""Client domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...shared.numbers import Percent
from ...shared.pagination import Pagination
from ...shared.validators import only_digits, validate_email


class ConvenioLink(BaseModel):
    """Insurance plan linked to a client"""

    convenioId: int
    nome: Optional[str] = None
    desconto: Optional[Percent] = None


class ClienteResponse(BaseModel):
    id: int
    nome: str
    email: Optional[str] = None
    dtnascimento: Optional[date] = None
    sexo: Optional[str] = None
    tipo: Optional[str] = None
    cpf: Optional[str] = None
    cep: Optional[str] = None
    logradouro: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    uf: Optional[str] = None
    telefone1: Optional[str] = None
    telefone2: Optional[str] = None
    status: str
    convenios: list[ConvenioLink] = []


class ClienteListItem(BaseModel):
    id: int
    nome: str
    cpf: Optional[str] = None
    email: Optional[str] = None
    tipoCliente: Optional[str] = None


class ClienteListResponse(BaseModel):
    data: list[ClienteListItem]
    pagination: Pagination


class ClienteUpdate(BaseModel):
    """
    Full update of a client. `convenios` replaces the linked plans and
    `desconto` maps a plan id to the client's discount on it.
    """

    nome: str
    email: Optional[str] = None
    dtnascimento: Optional[date] = None
    sexo: Optional[str] = None
    tipo: Optional[str] = None
    cpf: Optional[str] = None
    cep: Optional[str] = None
    logradouro: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    uf: Optional[str] = None
    telefone1: Optional[str] = None
    telefone2: Optional[str] = None
    convenios: list[int] = []
    desconto: dict[str, Any] = {}

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("cpf", "cep")
    @classmethod
    def strip_formatting(cls, v):
        return only_digits(v)

    @field_validator("uf")
    @classmethod
    def check_uf(cls, v):
        if v and len(v.strip()) != 2:
            raise ValueError("UF deve ter 2 letras")
        return v.strip().upper() if v else v
