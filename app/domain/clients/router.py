"""Client router - FastAPI endpoints for client operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Usuario
from ...shared.pagination import PageParams
from .schemas import ClienteListResponse, ClienteResponse, ClienteUpdate, ConvenioLink
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clientes", tags=["Clientes"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


@router.get("", response_model=ClienteListResponse)
async def list_clientes(
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    _current_user: Usuario = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Active clients, paginated, searchable by name/CPF/e-mail"""
    return service.list_clients(page, search)


@router.get("/{client_id}", response_model=ClienteResponse)
async def get_cliente(
    client_id: int,
    _current_user: Usuario = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Active client with its linked insurance plans"""
    return service.get_client_detail(client_id)


@router.get("/{client_id}/convenios")
async def get_cliente_convenios(
    client_id: int,
    _current_user: Usuario = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
) -> dict[str, list[ConvenioLink]]:
    """Insurance plans of a client (id, name and the client's discount)"""
    service.get_client(client_id)
    return {"data": service.get_client_plans(client_id)}


@router.put("/{client_id}")
async def update_cliente(
    client_id: int,
    data: ClienteUpdate,
    _current_user: Usuario = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Update a client and replace its insurance plans"""
    return service.update_client(client_id, data)
