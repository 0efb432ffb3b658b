"""Billing domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...shared.numbers import Money, Percent
from ...shared.pagination import Pagination


class ProcedimentoInfo(BaseModel):
    id: int
    nome: str
    codigo: Optional[str] = None


class ValorProcedimentoResponse(BaseModel):
    """Price of a procedure under a plan, before and after the plan discount"""

    id: int
    procedimento: ProcedimentoInfo
    valor: Money
    desconto: Percent
    valorFinal: Money
    convenio_id: int
    tipo_cliente: str


class LancamentoResponse(BaseModel):
    id: int
    valor: Optional[Money] = None
    descricao: Optional[str] = None
    data_lancamento: datetime
    tipo: str
    forma_pagamento: Optional[str] = None
    status_pagamento: Optional[str] = None
    cliente_id: Optional[int] = None
    plano_conta_id: Optional[int] = None
    caixa_id: Optional[int] = None
    agenda_id: Optional[int] = None
    usuario_id: Optional[str] = None
    status: Optional[str] = None

    class Config:
        from_attributes = True


class LancamentoListResponse(BaseModel):
    data: list[LancamentoResponse]
    pagination: Pagination


class ConvenioResponse(BaseModel):
    id: int
    nome: str
    desconto: Optional[Percent] = None
    tabela_faturamento_id: Optional[int] = None

    class Config:
        from_attributes = True


class ConvenioListResponse(BaseModel):
    data: list[ConvenioResponse]
    pagination: Pagination


class PriceMatrixRow(BaseModel):
    """Number of procedures a plan prices for one client type"""

    tipoCliente: str
    convenioId: int
    nome: str
    count: int
