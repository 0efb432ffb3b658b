"""Scheduling router - shift and appointment endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ... import config
from ...auth import get_current_user
from ...database import get_db
from ...models import Usuario
from ...shared.pagination import PageParams
from .schemas import (
    AgendaResponse,
    AgendaStatusChanged,
    AgendaStatusUpdate,
    AgendaUpdate,
    ExpedienteCreate,
    ExpedienteCreated,
    ExpedienteListResponse,
    ExpedienteUpdate,
)
from .service import AgendaService, ExpedienteService

logger = logging.getLogger(__name__)

expedientes_router = APIRouter(prefix="/expedientes", tags=["Expedientes"])
agendas_router = APIRouter(prefix="/agendas", tags=["Agendas"])


def get_expediente_service(db: Session = Depends(get_db)) -> ExpedienteService:
    """Dependency injection for ExpedienteService"""
    return ExpedienteService(db, filter_weekday=config.EXPEDIENTE_FILTER_BY_WEEKDAY)


def get_agenda_service(db: Session = Depends(get_db)) -> AgendaService:
    """Dependency injection for AgendaService"""
    return AgendaService(db)


# ============================================================================
# EXPEDIENTES
# ============================================================================


@expedientes_router.get("", response_model=ExpedienteListResponse)
async def list_expedientes(
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    alocacao_id: Optional[int] = Query(None),
    _current_user: Usuario = Depends(get_current_user),
    service: ExpedienteService = Depends(get_expediente_service),
):
    """Shifts with unit, specialty and provider names"""
    return service.list_expedientes(page, search, alocacao_id)


@expedientes_router.post("", response_model=ExpedienteCreated)
async def create_expediente(
    data: ExpedienteCreate,
    _current_user: Usuario = Depends(get_current_user),
    service: ExpedienteService = Depends(get_expediente_service),
):
    """Create a shift and generate its free appointment slots"""
    return service.create_expediente(data)


@expedientes_router.put("/{expediente_id}")
async def update_expediente(
    expediente_id: int,
    data: ExpedienteUpdate,
    _current_user: Usuario = Depends(get_current_user),
    service: ExpedienteService = Depends(get_expediente_service),
):
    return service.update_expediente(expediente_id, data)


@expedientes_router.delete("/{expediente_id}")
async def delete_expediente(
    expediente_id: int,
    _current_user: Usuario = Depends(get_current_user),
    service: ExpedienteService = Depends(get_expediente_service),
):
    return service.delete_expediente(expediente_id)


# ============================================================================
# AGENDAS
# ============================================================================


@agendas_router.get("/{agenda_id}", response_model=AgendaResponse)
async def get_agenda(
    agenda_id: int,
    _current_user: Usuario = Depends(get_current_user),
    service: AgendaService = Depends(get_agenda_service),
):
    return service.get_agenda(agenda_id)


@agendas_router.patch("/{agenda_id}", response_model=AgendaStatusChanged)
async def change_agenda_status(
    agenda_id: int,
    data: AgendaStatusUpdate,
    current_user: Usuario = Depends(get_current_user),
    service: AgendaService = Depends(get_agenda_service),
):
    """Change the appointment status; booking it creates a pending billing entry"""
    return service.change_status(agenda_id, data.situacao, current_user)


@agendas_router.put("/{agenda_id}")
async def update_agenda(
    agenda_id: int,
    data: AgendaUpdate,
    current_user: Usuario = Depends(get_current_user),
    service: AgendaService = Depends(get_agenda_service),
):
    return service.update_agenda(agenda_id, data, current_user)
