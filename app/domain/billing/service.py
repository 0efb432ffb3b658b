"""Billing service - procedure pricing and billing entries for appointments"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEFAULT_CLIENT_TYPE
from ...database import execute_with_retry
from ...models import STATUS_ACTIVE, Agenda, Lancamento
from ...shared.pagination import MAX_PAGE_SIZE, PageParams
from .pricing import apply_discount
from .repository import LancamentoRepository, PriceRepository
from .schemas import (
    ConvenioListResponse,
    ConvenioResponse,
    LancamentoListResponse,
    LancamentoResponse,
    PriceMatrixRow,
    ProcedimentoInfo,
    ValorProcedimentoResponse,
)

logger = logging.getLogger(__name__)

TIPO_ENTRADA = "ENTRADA"
PAGAMENTO_PENDENTE = "PENDENTE"
CLIENTE_NAO_INFORMADO = "Cliente não informado"
PROCEDIMENTO_NAO_INFORMADO = "Procedimento não informado"

# Client types the price tables are filled for
CLIENT_TYPES = ("SOCIO", "NSOCIO", "PARCEIRO", "FUNCIONARIO")


class BillingService:
    """Service layer for prices and lançamentos"""

    def __init__(self, db: Session):
        self.db = db
        self.prices = PriceRepository()
        self.repo = LancamentoRepository()

    def resolve_price(
        self, procedure_id: int, client_type: str, plan_id: int
    ) -> Optional[Decimal]:
        """Discounted price, or None when the plan's billing table has no price"""
        price = self.prices.resolve_price(self.db, procedure_id, client_type, plan_id)
        if price is None:
            logger.info(
                f"⚠️ Sem valor para procedimento {procedure_id} (tipo {client_type}, convênio {plan_id})"
            )
        return price

    def list_plans(
        self, page: PageParams, search: Optional[str] = None, return_all: bool = False
    ) -> ConvenioListResponse:
        """Plans; the panel selects load every plan with limit=1000"""
        if (return_all or page.limit == MAX_PAGE_SIZE) and not search:
            convenios, total = self.prices.search_plans(self.db)
            return ConvenioListResponse(
                data=[ConvenioResponse.model_validate(c) for c in convenios],
                pagination={"page": 1, "limit": total, "total": total, "totalPages": 1},
            )

        convenios, total = self.prices.search_plans(
            self.db, search=search, limit=page.limit, offset=page.offset
        )
        return ConvenioListResponse(
            data=[ConvenioResponse.model_validate(c) for c in convenios],
            pagination=page.build(total),
        )

    def price_matrix(self, client_types: tuple[str, ...] = CLIENT_TYPES) -> list[PriceMatrixRow]:
        """How many procedures every plan prices for each client type"""
        convenios, _ = self.prices.search_plans(self.db)

        rows = []
        for client_type in client_types:
            for convenio in convenios:
                count = len(self.prices.list_plan_prices(self.db, convenio.id, client_type))
                if not count:
                    logger.info(f"⚠️ Nenhum procedimento para {client_type} + {convenio.nome}")
                rows.append(
                    PriceMatrixRow(
                        tipoCliente=client_type, convenioId=convenio.id, nome=convenio.nome, count=count
                    )
                )
        return rows

    def list_plan_prices(self, plan_id: int, client_type: str) -> list[ValorProcedimentoResponse]:
        if not self.prices.get_plan(self.db, plan_id):
            raise HTTPException(status_code=404, detail="Convênio não encontrado")

        rows = self.prices.list_plan_prices(self.db, plan_id, client_type)
        return [
            ValorProcedimentoResponse(
                id=valor.id,
                procedimento=ProcedimentoInfo(
                    id=procedimento.id, nome=procedimento.nome, codigo=procedimento.codigo
                ),
                valor=valor.valor,
                desconto=desconto or Decimal("0"),
                valorFinal=apply_discount(valor.valor, desconto),
                convenio_id=plan_id,
                tipo_cliente=valor.tipo,
            )
            for valor, procedimento, desconto in rows
        ]

    def create_entry_for_agenda(
        self, agenda: Agenda, usuario_id: str, data_lancamento: datetime
    ) -> Lancamento:
        """
        Pending income entry for a booked appointment.

        An unpriced procedure is billed as 0 rather than blocking the entry.
        """
        cliente = self.repo.get_client(self.db, agenda.cliente_id)
        client_type = (cliente.tipo if cliente else None) or DEFAULT_CLIENT_TYPE
        cliente_nome = cliente.nome if cliente else CLIENTE_NAO_INFORMADO
        procedimento_nome = (
            self.repo.get_procedure_name(self.db, agenda.procedimento_id) or PROCEDIMENTO_NAO_INFORMADO
        )

        valor = None
        if agenda.procedimento_id and agenda.convenio_id:
            valor = self.resolve_price(agenda.procedimento_id, client_type, agenda.convenio_id)
        if valor is None:
            valor = Decimal("0.00")

        lancamento = execute_with_retry(
            self.db,
            self.repo.create_lancamento,
            valor=valor,
            descricao=f"Agendamento - {cliente_nome} - {procedimento_nome}",
            data_lancamento=data_lancamento,
            tipo=TIPO_ENTRADA,
            forma_pagamento=None,
            status_pagamento=PAGAMENTO_PENDENTE,
            cliente_id=agenda.cliente_id,
            plano_conta_id=self.repo.get_active_plano_conta_id(self.db),
            caixa_id=self.repo.get_active_caixa_id(self.db),
            agenda_id=agenda.id,
            usuario_id=usuario_id,
            status=STATUS_ACTIVE,
        )
        logger.info(f"✅ [LANCAMENTO] Criado {lancamento.id} para agenda {agenda.id} (valor {valor})")
        return lancamento

    def list_lancamentos(
        self,
        page: PageParams,
        agenda_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> LancamentoListResponse:
        lancamentos, total = self.repo.list_lancamentos(
            self.db, agenda_id, start_date, end_date, page.limit, page.offset
        )
        return LancamentoListResponse(
            data=[LancamentoResponse.model_validate(lancamento) for lancamento in lancamentos],
            pagination=page.build(total),
        )
