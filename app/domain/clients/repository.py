"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import STATUS_ACTIVE, Cliente, Convenio, ConvenioCliente


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def search_clients(
        db: Session, search: Optional[str], limit: int, offset: int
    ) -> tuple[list[Cliente], int]:
        """Active clients ordered by name, filtered by name/CPF/e-mail"""
        query = db.query(Cliente).filter(Cliente.status == STATUS_ACTIVE)

        if search:
            term = f"%{search}%"
            query = query.filter(
                or_(Cliente.nome.like(term), Cliente.cpf.like(term), Cliente.email.like(term))
            )

        total = query.with_entities(func.count(Cliente.id)).scalar() or 0
        clientes = query.order_by(Cliente.nome.asc()).limit(limit).offset(offset).all()
        return clientes, total

    @staticmethod
    def get_active_client(db: Session, client_id: int) -> Optional[Cliente]:
        return (
            db.query(Cliente)
            .filter(Cliente.id == client_id, Cliente.status == STATUS_ACTIVE)
            .first()
        )

    @staticmethod
    def get_client(db: Session, client_id: int) -> Optional[Cliente]:
        return db.query(Cliente).filter(Cliente.id == client_id).first()

    @staticmethod
    def get_plan_links(db: Session, client_id: int) -> list[tuple[ConvenioCliente, Optional[str]]]:
        """Plan links of a client with the plan name"""
        return (
            db.query(ConvenioCliente, Convenio.nome)
            .outerjoin(Convenio, Convenio.id == ConvenioCliente.convenio_id)
            .filter(ConvenioCliente.cliente_id == client_id)
            .order_by(ConvenioCliente.id.asc())
            .all()
        )

    @staticmethod
    def update_client(
        db: Session, cliente: Cliente, fields: dict, plan_discounts: list[tuple[int, float]]
    ) -> Cliente:
        """Update the client row and replace its plan links in one transaction"""
        try:
            for key, value in fields.items():
                setattr(cliente, key, value)

            db.query(ConvenioCliente).filter(ConvenioCliente.cliente_id == cliente.id).delete(
                synchronize_session=False
            )
            for convenio_id, desconto in plan_discounts:
                db.add(ConvenioCliente(convenio_id=convenio_id, cliente_id=cliente.id, desconto=desconto))

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(cliente)
        return cliente
