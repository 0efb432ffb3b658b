"""Scheduling repository - Database operations for shifts and appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session

from ...models import Agenda, Alocacao, Especialidade, Expediente, Prestador, Unidade


class SchedulingRepository:
    """Repository for expedientes and agendas"""

    @staticmethod
    def get_alocacao(db: Session, alocacao_id: int) -> Optional[Alocacao]:
        return db.query(Alocacao).filter(Alocacao.id == alocacao_id).first()

    @staticmethod
    def list_expedientes(
        db: Session,
        search: Optional[str],
        alocacao_id: Optional[int],
        limit: int,
        offset: int,
    ) -> tuple[list, int]:
        """Shifts joined with allocation names; limit/offset are bound parameters"""
        query = (
            db.query(
                Expediente,
                Alocacao.unidade_id,
                Alocacao.especialidade_id,
                Alocacao.prestador_id,
                Unidade.nome.label("unidade_nome"),
                Especialidade.nome.label("especialidade_nome"),
                Prestador.nome.label("prestador_nome"),
            )
            .outerjoin(Alocacao, Expediente.alocacao_id == Alocacao.id)
            .outerjoin(Unidade, Alocacao.unidade_id == Unidade.id)
            .outerjoin(Especialidade, Alocacao.especialidade_id == Especialidade.id)
            .outerjoin(Prestador, Alocacao.prestador_id == Prestador.id)
        )
        count_query = db.query(func.count(Expediente.id))

        filters = []
        if search:
            term = f"%{search}%"
            filters.append(
                or_(
                    cast(Expediente.dtinicio, String).like(term),
                    cast(Expediente.dtfinal, String).like(term),
                    Expediente.semana.like(term),
                )
            )
        if alocacao_id is not None:
            filters.append(Expediente.alocacao_id == alocacao_id)

        if filters:
            query = query.filter(*filters)
            count_query = count_query.filter(*filters)

        rows = (
            query.order_by(Expediente.dtinicio.asc(), Expediente.id.asc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return rows, count_query.scalar() or 0

    @staticmethod
    def get_expediente(db: Session, expediente_id: int) -> Optional[Expediente]:
        return db.query(Expediente).filter(Expediente.id == expediente_id).first()

    @staticmethod
    def create_expediente_with_slots(
        db: Session,
        expediente_data: dict,
        alocacao: Alocacao,
        slots: list[datetime],
        slot_status: str,
        slot_type: str,
    ) -> tuple[Expediente, int]:
        """
        Insert a shift and one appointment per slot in a single transaction.
        Nothing is kept if any insert fails.
        """
        try:
            expediente = Expediente(**expediente_data)
            db.add(expediente)
            db.flush()

            db.add_all(
                [
                    Agenda(
                        dtagenda=slot,
                        situacao=slot_status,
                        expediente_id=expediente.id,
                        prestador_id=alocacao.prestador_id,
                        unidade_id=alocacao.unidade_id,
                        especialidade_id=alocacao.especialidade_id,
                        tipo=slot_type,
                    )
                    for slot in slots
                ]
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(expediente)
        return expediente, len(slots)

    @staticmethod
    def update_expediente(db: Session, expediente_id: int, **updates) -> int:
        count = (
            db.query(Expediente)
            .filter(Expediente.id == expediente_id)
            .update(updates, synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def delete_expediente(db: Session, expediente_id: int) -> int:
        count = (
            db.query(Expediente)
            .filter(Expediente.id == expediente_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def get_agenda(db: Session, agenda_id: int) -> Optional[Agenda]:
        return db.query(Agenda).filter(Agenda.id == agenda_id).first()

    @staticmethod
    def update_agenda(db: Session, agenda_id: int, **updates) -> int:
        count = (
            db.query(Agenda)
            .filter(Agenda.id == agenda_id)
            .update(updates, synchronize_session=False)
        )
        db.commit()
        return count
