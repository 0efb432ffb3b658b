"""Scheduling service - shift slot generation and appointment status workflow"""

import logging
from datetime import datetime, time
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...database import execute_with_retry
from ...models import Agenda, Usuario
from ...shared.pagination import PageParams
from ..billing.service import BillingService
from .repository import SchedulingRepository
from .schemas import (
    AgendaStatusChanged,
    AgendaUpdate,
    ExpedienteCreate,
    ExpedienteCreated,
    ExpedienteListResponse,
    ExpedienteResponse,
    ExpedienteUpdate,
)
from .slots import generate_slots

logger = logging.getLogger(__name__)

SITUACAO_LIVRE = "LIVRE"
SITUACAO_AGENDADO = "AGENDADO"
TIPO_PROCEDIMENTO = "PROCEDIMENTO"


class ExpedienteService:
    """Service layer for provider shifts"""

    def __init__(self, db: Session, filter_weekday: bool = False):
        self.db = db
        self.filter_weekday = filter_weekday
        self.repo = SchedulingRepository()

    def list_expedientes(
        self, page: PageParams, search: Optional[str] = None, alocacao_id: Optional[int] = None
    ) -> ExpedienteListResponse:
        rows, total = self.repo.list_expedientes(
            self.db, search, alocacao_id, page.limit, page.offset
        )
        logger.debug(f"🔍 Expedientes encontrados: {len(rows)} de {total}")

        data = []
        for row in rows:
            expediente = row.Expediente
            data.append(
                ExpedienteResponse(
                    id=expediente.id,
                    dtinicio=expediente.dtinicio,
                    dtfinal=expediente.dtfinal,
                    hinicio=expediente.hinicio,
                    hfinal=expediente.hfinal,
                    intervalo=expediente.intervalo,
                    semana=expediente.semana,
                    alocacao_id=expediente.alocacao_id,
                    createdAt=expediente.createdAt,
                    updatedAt=expediente.updatedAt,
                    unidade_id=row.unidade_id,
                    especialidade_id=row.especialidade_id,
                    prestador_id=row.prestador_id,
                    unidade_nome=row.unidade_nome,
                    especialidade_nome=row.especialidade_nome,
                    prestador_nome=row.prestador_nome,
                )
            )

        return ExpedienteListResponse(data=data, pagination=page.build(total))

    def create_expediente(self, data: ExpedienteCreate) -> ExpedienteCreated:
        """Create a shift and its free appointment slots atomically"""
        logger.info(f"🔍 Criando expediente: {data.model_dump()}")

        alocacao = self.repo.get_alocacao(self.db, data.alocacao_id)
        if not alocacao:
            raise HTTPException(
                status_code=404, detail=f"Alocação com ID {data.alocacao_id} não encontrada"
            )

        try:
            slots = generate_slots(
                data.dtinicio,
                data.dtfinal,
                data.semana,
                data.hinicio,
                data.hfinal,
                data.intervalo,
                filter_weekday=self.filter_weekday,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if not slots:
            raise HTTPException(
                status_code=400,
                detail=(
                    f'Não existe nenhuma data correspondente à semana "{data.semana}" '
                    f"entre {data.dtinicio} e {data.dtfinal}."
                ),
            )

        expediente, created = execute_with_retry(
            self.db,
            self.repo.create_expediente_with_slots,
            data.model_dump(),
            alocacao,
            slots,
            SITUACAO_LIVRE,
            TIPO_PROCEDIMENTO,
        )
        logger.info(f"✅ Expediente {expediente.id} criado com {created} agendamentos")

        return ExpedienteCreated(
            expedienteId=expediente.id,
            agendamentosCriados=created,
            message="Expediente e agendamentos criados com sucesso",
        )

    def update_expediente(self, expediente_id: int, data: ExpedienteUpdate) -> dict:
        """Update shift fields; slots generated earlier are not regenerated"""
        if not self.repo.get_expediente(self.db, expediente_id):
            raise HTTPException(status_code=404, detail="Expediente não encontrado")

        if not self.repo.get_alocacao(self.db, data.alocacao_id):
            raise HTTPException(
                status_code=404, detail=f"Alocação com ID {data.alocacao_id} não encontrada"
            )

        execute_with_retry(self.db, self.repo.update_expediente, expediente_id, **data.model_dump())
        return {"success": True}

    def delete_expediente(self, expediente_id: int) -> dict:
        """Delete the shift row; its appointments are the caller's to clean up"""
        deleted = execute_with_retry(self.db, self.repo.delete_expediente, expediente_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Expediente não encontrado")
        return {"success": True}


class AgendaService:
    """Service layer for appointments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()
        self.billing = BillingService(db)

    def get_agenda(self, agenda_id: int) -> Agenda:
        agenda = execute_with_retry(self.db, self.repo.get_agenda, agenda_id)
        if not agenda:
            raise HTTPException(status_code=404, detail="Agenda não encontrada")
        return agenda

    def change_status(self, agenda_id: int, situacao: str, user: Usuario) -> AgendaStatusChanged:
        """
        Change an appointment's status. Booking it (AGENDADO) bills it once;
        the status change stands even if billing fails.
        """
        agenda = self.get_agenda(agenda_id)
        old_situacao = agenda.situacao
        logger.info(f"🔄 [AGENDA PATCH] {agenda_id}: {old_situacao} -> {situacao} por {user.login}")

        execute_with_retry(self.db, self.repo.update_agenda, agenda_id, situacao=situacao)

        lancamento_criado = False
        if situacao == SITUACAO_AGENDADO and old_situacao != SITUACAO_AGENDADO:
            lancamento_criado = self._bill_booking(agenda_id, user.login, datetime.utcnow())

        agenda = self.get_agenda(agenda_id)
        return AgendaStatusChanged(
            message=f"Situação alterada para {situacao}",
            oldSituacao=old_situacao,
            newSituacao=agenda.situacao,
            lancamentoCriado=lancamento_criado,
        )

    def update_agenda(self, agenda_id: int, data: AgendaUpdate, user: Usuario) -> dict:
        """Full update; booking the appointment bills it on the appointment date"""
        agenda = self.get_agenda(agenda_id)
        old_situacao = agenda.situacao

        execute_with_retry(self.db, self.repo.update_agenda, agenda_id, **data.model_dump())
        logger.info(f"✅ [AGENDA PUT] Agenda {agenda_id} atualizada")

        lancamento_criado = False
        if data.situacao == SITUACAO_AGENDADO and old_situacao != SITUACAO_AGENDADO:
            data_lancamento = datetime.combine(data.dtagenda.date(), time())
            lancamento_criado = self._bill_booking(agenda_id, user.login, data_lancamento)

        return {"success": True, "lancamentoCriado": lancamento_criado}

    def _bill_booking(self, agenda_id: int, usuario_id: str, data_lancamento: datetime) -> bool:
        """
        Best effort: a failed billing entry is logged and rolled back on its
        own, the committed status change is kept.
        """
        try:
            agenda = self.repo.get_agenda(self.db, agenda_id)
            self.billing.create_entry_for_agenda(agenda, usuario_id, data_lancamento)
            return True
        except (SQLAlchemyError, ValueError) as e:
            self.db.rollback()
            logger.error(f"❌ [LANCAMENTO] Falha ao criar para agenda {agenda_id}, situação mantida: {e}")
            return False
