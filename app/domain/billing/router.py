"""Billing router - FastAPI endpoints for prices and billing entries"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Usuario
from ...shared.pagination import PageParams
from .schemas import ConvenioListResponse, LancamentoListResponse, ValorProcedimentoResponse
from .service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Billing"])


def get_billing_service(db: Session = Depends(get_db)) -> BillingService:
    """Dependency injection for BillingService"""
    return BillingService(db)


@router.get("/convenios", response_model=ConvenioListResponse)
async def list_convenios(
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    return_all: bool = Query(False, alias="all"),
    _current_user: Usuario = Depends(get_current_user),
    service: BillingService = Depends(get_billing_service),
):
    """Plans ordered by name; `all=true` or limit=1000 returns every plan"""
    return service.list_plans(page, search=search, return_all=return_all)


@router.get("/valor-procedimento", response_model=list[ValorProcedimentoResponse])
async def list_valor_procedimento(
    convenio_id: int = Query(...),
    tipo_cliente: str = Query(..., alias="tipoCliente", min_length=1),
    _current_user: Usuario = Depends(get_current_user),
    service: BillingService = Depends(get_billing_service),
):
    """Procedures priced by a plan for a client type, with the plan discount applied"""
    return service.list_plan_prices(convenio_id, tipo_cliente)


@router.get("/lancamentos", response_model=LancamentoListResponse)
async def list_lancamentos(
    page: PageParams = Depends(),
    agenda_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    _current_user: Usuario = Depends(get_current_user),
    service: BillingService = Depends(get_billing_service),
):
    """Billing entries, newest first"""
    return service.list_lancamentos(page, agenda_id, start_date, end_date)
