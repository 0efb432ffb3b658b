"""Client service - Business logic for client operations"""

import logging
import math
from decimal import Decimal
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Cliente
from ...shared.pagination import PageParams
from .repository import ClientRepository
from .schemas import (
    ClienteListItem,
    ClienteListResponse,
    ClienteResponse,
    ClienteUpdate,
    ConvenioLink,
)

logger = logging.getLogger(__name__)

CLIENT_FIELDS = (
    "nome",
    "email",
    "dtnascimento",
    "sexo",
    "tipo",
    "cpf",
    "cep",
    "logradouro",
    "numero",
    "bairro",
    "cidade",
    "uf",
    "telefone1",
    "telefone2",
)


def coerce_discount(value: Any) -> float:
    """Numeric discounts pass through; anything else (missing, text, NaN) is 0"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return 0
    if isinstance(value, float) and math.isnan(value):
        return 0
    return value


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def list_clients(self, page: PageParams, search: Optional[str] = None) -> ClienteListResponse:
        clientes, total = self.repo.search_clients(self.db, search, page.limit, page.offset)
        return ClienteListResponse(
            data=[
                ClienteListItem(
                    id=c.id, nome=c.nome, cpf=c.cpf, email=c.email, tipoCliente=c.tipo
                )
                for c in clientes
            ],
            pagination=page.build(total),
        )

    def get_client(self, client_id: int) -> Cliente:
        cliente = self.repo.get_active_client(self.db, client_id)
        if not cliente:
            raise HTTPException(status_code=404, detail="Cliente não encontrado")
        return cliente

    def get_client_detail(self, client_id: int) -> ClienteResponse:
        """Active client with the discount of each linked plan"""
        cliente = self.get_client(client_id)
        data = {field: getattr(cliente, field) for field in CLIENT_FIELDS}
        return ClienteResponse(
            id=cliente.id,
            status=cliente.status,
            convenios=self.get_client_plans(client_id, include_names=False),
            **data,
        )

    def get_client_plans(self, client_id: int, include_names: bool = True) -> list[ConvenioLink]:
        links = self.repo.get_plan_links(self.db, client_id)
        return [
            ConvenioLink(
                convenioId=link.convenio_id,
                nome=nome if include_names else None,
                desconto=link.desconto,
            )
            for link, nome in links
        ]

    def update_client(self, client_id: int, data: ClienteUpdate) -> dict:
        """Update a client and replace its plan links"""
        cliente = self.repo.get_client(self.db, client_id)
        if not cliente:
            raise HTTPException(status_code=404, detail="Cliente não encontrado")

        fields = {field: getattr(data, field) for field in CLIENT_FIELDS}

        plan_discounts = []
        for convenio_id in data.convenios:
            raw = data.desconto.get(str(convenio_id))
            plan_discounts.append((convenio_id, coerce_discount(raw)))

        self.repo.update_client(self.db, cliente, fields, plan_discounts)
        logger.info(f"✅ Cliente {client_id} atualizado com {len(plan_discounts)} convênio(s)")
        return {"success": True}
