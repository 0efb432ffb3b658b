"""Billing repository - Database operations for prices and billing entries"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import (
    STATUS_ACTIVE,
    Caixa,
    Cliente,
    Convenio,
    Lancamento,
    PlanoConta,
    Procedimento,
    ValorProcedimento,
)
from .pricing import apply_discount

# Fallback ids when no active cash register / chart-of-accounts entry exists
DEFAULT_CAIXA_ID = 1
DEFAULT_PLANO_CONTA_ID = 1


class PriceRepository:
    """Procedure prices restricted to an insurance plan's billing table"""

    @staticmethod
    def find_price_row(
        db: Session, procedure_id: int, client_type: str, plan_id: int
    ) -> Optional[tuple[Decimal, Optional[Decimal]]]:
        """(base price, plan discount) or None when the plan does not price it"""
        row = (
            db.query(ValorProcedimento.valor, Convenio.desconto)
            .join(Convenio, Convenio.tabela_faturamento_id == ValorProcedimento.tabela_faturamento_id)
            .filter(
                ValorProcedimento.procedimento_id == procedure_id,
                ValorProcedimento.tipo == client_type,
                Convenio.id == plan_id,
            )
            .first()
        )
        if row is None:
            return None
        return row.valor, row.desconto

    @classmethod
    def resolve_price(
        cls, db: Session, procedure_id: int, client_type: str, plan_id: int
    ) -> Optional[Decimal]:
        """Discounted price of a procedure for a client type under a plan, None if unpriced"""
        row = cls.find_price_row(db, procedure_id, client_type, plan_id)
        if row is None:
            return None
        base_price, discount = row
        return apply_discount(base_price, discount)

    @staticmethod
    def get_plan(db: Session, plan_id: int) -> Optional[Convenio]:
        return db.query(Convenio).filter(Convenio.id == plan_id).first()

    @staticmethod
    def search_plans(
        db: Session, search: Optional[str] = None, limit: Optional[int] = None, offset: int = 0
    ) -> tuple[list[Convenio], int]:
        """Plans ordered by name, optionally filtered by name"""
        query = db.query(Convenio)
        if search:
            query = query.filter(Convenio.nome.like(f"%{search}%"))

        total = query.with_entities(func.count(Convenio.id)).scalar() or 0

        query = query.order_by(Convenio.nome.asc(), Convenio.id.asc())
        if limit is not None:
            query = query.limit(limit).offset(offset)

        return query.all(), total

    @staticmethod
    def list_plan_prices(
        db: Session, plan_id: int, client_type: str
    ) -> list[tuple[ValorProcedimento, Procedimento, Optional[Decimal]]]:
        """Every procedure priced in the plan's billing table for a client type"""
        return (
            db.query(ValorProcedimento, Procedimento, Convenio.desconto)
            .join(Procedimento, Procedimento.id == ValorProcedimento.procedimento_id)
            .join(Convenio, Convenio.tabela_faturamento_id == ValorProcedimento.tabela_faturamento_id)
            .filter(Convenio.id == plan_id, ValorProcedimento.tipo == client_type)
            .order_by(Procedimento.nome.asc())
            .all()
        )


class LancamentoRepository:
    """Repository for billing entries (lançamentos)"""

    @staticmethod
    def get_client(db: Session, client_id: Optional[int]) -> Optional[Cliente]:
        if not client_id:
            return None
        return db.query(Cliente).filter(Cliente.id == client_id).first()

    @staticmethod
    def get_procedure_name(db: Session, procedure_id: Optional[int]) -> Optional[str]:
        if not procedure_id:
            return None
        return db.query(Procedimento.nome).filter(Procedimento.id == procedure_id).scalar()

    @staticmethod
    def get_active_caixa_id(db: Session) -> int:
        caixa_id = (
            db.query(Caixa.id).filter(Caixa.status == STATUS_ACTIVE).order_by(Caixa.id).limit(1).scalar()
        )
        return caixa_id or DEFAULT_CAIXA_ID

    @staticmethod
    def get_active_plano_conta_id(db: Session) -> int:
        plano_conta_id = (
            db.query(PlanoConta.id)
            .filter(PlanoConta.status == STATUS_ACTIVE)
            .order_by(PlanoConta.id)
            .limit(1)
            .scalar()
        )
        return plano_conta_id or DEFAULT_PLANO_CONTA_ID

    @staticmethod
    def create_lancamento(db: Session, **lancamento_data) -> Lancamento:
        lancamento = Lancamento(**lancamento_data)
        db.add(lancamento)
        db.commit()
        db.refresh(lancamento)
        return lancamento

    @staticmethod
    def list_lancamentos(
        db: Session,
        agenda_id: Optional[int],
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        limit: int,
        offset: int,
    ) -> tuple[list[Lancamento], int]:
        query = db.query(Lancamento)
        if agenda_id is not None:
            query = query.filter(Lancamento.agenda_id == agenda_id)
        if start_date:
            query = query.filter(Lancamento.data_lancamento >= start_date)
        if end_date:
            query = query.filter(Lancamento.data_lancamento <= end_date)

        total = query.with_entities(func.count(Lancamento.id)).scalar() or 0
        lancamentos = (
            query.order_by(Lancamento.data_lancamento.desc(), Lancamento.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return lancamentos, total
