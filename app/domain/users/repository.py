"""User repository - Database operations for the legacy user store"""

from typing import Optional

from sqlalchemy import func, inspect, or_
from sqlalchemy.orm import Session

from ...models import STATUS_ACTIVE, Usuario, UsuarioGrupo, UsuarioSistema


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_active_user(db: Session, login: str) -> Optional[Usuario]:
        """Get an active user by login"""
        return (
            db.query(Usuario)
            .filter(Usuario.login == login, Usuario.status == STATUS_ACTIVE)
            .first()
        )

    @staticmethod
    def get_user(db: Session, login: str) -> Optional[Usuario]:
        """Get a user by login regardless of status"""
        return db.query(Usuario).filter(Usuario.login == login).first()

    @staticmethod
    def search_active_users(
        db: Session, search: Optional[str] = None, limit: Optional[int] = None, offset: int = 0
    ) -> tuple[list[Usuario], int]:
        """Active users ordered by name, optionally filtered by name/e-mail"""
        query = db.query(Usuario).filter(Usuario.status == STATUS_ACTIVE)

        if search:
            term = f"%{search}%"
            query = query.filter(or_(Usuario.nome.like(term), Usuario.email.like(term)))

        total = query.with_entities(func.count(Usuario.login)).scalar() or 0

        query = query.order_by(Usuario.nome.asc())
        if limit is not None:
            query = query.limit(limit).offset(offset)

        return query.all(), total

    @staticmethod
    def create_user(db: Session, **user_data) -> Usuario:
        usuario = Usuario(**user_data)
        db.add(usuario)
        db.commit()
        db.refresh(usuario)
        return usuario

    @staticmethod
    def update_user(db: Session, usuario: Usuario, **updates) -> Usuario:
        for key, value in updates.items():
            if value is not None and hasattr(usuario, key):
                setattr(usuario, key, value)

        db.commit()
        db.refresh(usuario)
        return usuario

    @staticmethod
    def table_exists(db: Session, table_name: str) -> bool:
        """Whether a table exists in the connected schema (legacy installs vary)"""
        return inspect(db.get_bind()).has_table(table_name)

    @staticmethod
    def get_group_ids(db: Session, login: str) -> list[int]:
        rows = db.query(UsuarioGrupo.grupo_id).filter(UsuarioGrupo.usuario_login == login).all()
        return [row.grupo_id for row in rows]

    @staticmethod
    def count_system_access(
        db: Session, login: str, system_id: int, nivel: Optional[str] = None
    ) -> int:
        query = db.query(func.count(UsuarioSistema.id)).filter(
            UsuarioSistema.sistemas_id == system_id,
            UsuarioSistema.usuarios_login == login,
        )
        if nivel is not None:
            query = query.filter(UsuarioSistema.nivel == nivel)
        return query.scalar() or 0
