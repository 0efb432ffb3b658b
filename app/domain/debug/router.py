"""Debug router - data behind the procedure pricing test page"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import DEFAULT_CLIENT_TYPE
from ...database import get_db
from ...models import Usuario
from ...shared.pagination import MAX_PAGE_SIZE, PageParams
from ..billing.schemas import PriceMatrixRow, ValorProcedimentoResponse
from ..billing.service import BillingService
from ..clients.schemas import ClienteListItem, ConvenioLink
from ..clients.service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["Debug"])


class ProcedimentosDebugResponse(BaseModel):
    clientes: list[ClienteListItem]
    clienteSelecionado: Optional[ClienteListItem] = None
    convenios: list[ConvenioLink] = []
    convenioSelecionado: Optional[ConvenioLink] = None
    tipoClienteSelecionado: str
    procedimentos: list[ValorProcedimentoResponse] = []


@router.get("/procedimentos", response_model=ProcedimentosDebugResponse)
async def debug_procedimentos(
    cliente_id: Optional[int] = Query(None),
    convenio_id: Optional[int] = Query(None),
    tipo_cliente: Optional[str] = Query(None, alias="tipoCliente"),
    search: Optional[str] = Query(None),
    _current_user: Usuario = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Clients, the selected client's plans and the procedures priced for the
    selected plan, in one response.
    """
    clients = ClientService(db)
    billing = BillingService(db)

    listing = clients.list_clients(PageParams(page=1, limit=MAX_PAGE_SIZE), search)

    selected = None
    convenios = []
    if cliente_id is not None:
        cliente = clients.get_client(cliente_id)
        selected = ClienteListItem(
            id=cliente.id, nome=cliente.nome, cpf=cliente.cpf, email=cliente.email, tipoCliente=cliente.tipo
        )
        convenios = clients.get_client_plans(cliente_id)

    tipo = tipo_cliente or (selected.tipoCliente if selected else None) or DEFAULT_CLIENT_TYPE

    convenio_selecionado = None
    procedimentos = []
    if convenio_id is not None:
        convenio_selecionado = next((c for c in convenios if c.convenioId == convenio_id), None)
        procedimentos = billing.list_plan_prices(convenio_id, tipo)
        logger.info(f"🔍 [DEBUG] {len(procedimentos)} procedimento(s) para convênio {convenio_id}/{tipo}")

    return ProcedimentosDebugResponse(
        clientes=listing.data,
        clienteSelecionado=selected,
        convenios=convenios,
        convenioSelecionado=convenio_selecionado,
        tipoClienteSelecionado=tipo,
        procedimentos=procedimentos,
    )


@router.get("/procedimentos/matrix", response_model=list[PriceMatrixRow])
async def debug_price_matrix(
    _current_user: Usuario = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Priced procedure count for every client type and plan"""
    rows = BillingService(db).price_matrix()
    logger.info(f"🔍 [DEBUG] Matriz de preços com {len(rows)} linha(s)")
    return rows
