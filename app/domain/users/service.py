"""User service - Authentication and user management against the legacy store"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import STATUS_ACTIVE, Usuario
from ...security_utils import (
    create_session_token,
    hash_password_bcrypt,
    log_auth_event,
    verify_password_bcrypt,
)
from ...shared.pagination import MAX_PAGE_SIZE, PageParams
from .repository import UserRepository
from .schemas import (
    AuthUser,
    LoginResponse,
    UsuarioCreate,
    UsuarioListResponse,
    UsuarioResponse,
    UsuarioUpdate,
)

logger = logging.getLogger(__name__)

# usuariogrupo ids that grant administrator level
ADMIN_GROUP_IDS = {1, 2, 3, 4}
# Id of this application in usuario_sistema
SYSTEM_ID = 1088

LEVEL_ADMIN = "Administrador"
LEVEL_USER = "Usuario"
SYSTEM_ADMIN_NAME = "Administrador do Sistema"


def is_admin_by_name(login: str, nome: str) -> bool:
    """Name-based fallback used when group membership cannot be read"""
    nome_lower = (nome or "").lower()
    return (
        login.lower() == "admin"
        or "administrador" in nome_lower
        or "admin" in nome_lower
        or nome == SYSTEM_ADMIN_NAME
    )


class UserService:
    """Service layer for authentication and user management"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, login: str, senha: str, ip_address: Optional[str] = None) -> LoginResponse:
        """Verify credentials and issue a session token"""
        usuario = self.repo.get_active_user(self.db, login)
        if not usuario:
            logger.warning(f"❌ Usuário não encontrado ou inativo: {login}")
            log_auth_event("failed_auth", login, ip_address, reason="unknown_user")
            raise HTTPException(status_code=401, detail="Usuário ou senha inválidos")

        if not verify_password_bcrypt(senha, usuario.senha):
            logger.warning(f"❌ Senha incorreta para: {login}")
            log_auth_event("failed_auth", login, ip_address, reason="bad_password")
            raise HTTPException(status_code=401, detail="Usuário ou senha inválidos")

        auth_user = self.build_auth_user(usuario)
        token = create_session_token(usuario.login, auth_user.userLevel)
        log_auth_event("login", usuario.login, ip_address, level=auth_user.userLevel)
        logger.info(f"✅ Usuário autenticado: {usuario.login} ({auth_user.userLevel})")

        return LoginResponse(access_token=token, user=auth_user)

    def build_auth_user(self, usuario: Usuario) -> AuthUser:
        is_admin = self.resolve_admin(usuario)
        return AuthUser(
            login=usuario.login,
            nome=usuario.nome,
            email=usuario.email or None,
            isAdmin=is_admin,
            hasSystemAccess=True,
            userLevel=LEVEL_ADMIN if is_admin else LEVEL_USER,
        )

    def resolve_admin(self, usuario: Usuario) -> bool:
        """
        Administrator when the user belongs to one of ADMIN_GROUP_IDS.
        Installs without the usuariogrupo table fall back to the user's name.
        """
        if usuario.nome == SYSTEM_ADMIN_NAME:
            return True

        try:
            if self.repo.table_exists(self.db, "usuariogrupo"):
                group_ids = self.repo.get_group_ids(self.db, usuario.login)
                logger.debug(f"🔍 Grupos do usuário {usuario.login}: {group_ids}")
                return any(group_id in ADMIN_GROUP_IDS for group_id in group_ids)
            logger.info("⚠️ Tabela usuariogrupo não encontrada, usando verificação por nome")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Falha ao ler grupos de {usuario.login}, usando verificação por nome: {e}")

        return is_admin_by_name(usuario.login, usuario.nome)

    def check_user_admin(self, login: str) -> bool:
        """Whether the user has any access row for this system"""
        return self._check_system_access(login)

    def check_user_system_admin(self, login: str) -> bool:
        """Whether the user is an administrator of this system"""
        return self._check_system_access(login, nivel=LEVEL_ADMIN)

    def _check_system_access(self, login: str, nivel: Optional[str] = None) -> bool:
        try:
            if not self.repo.table_exists(self.db, "usuario_sistema"):
                logger.info("⚠️ Tabela usuario_sistema não encontrada")
                return False
            return self.repo.count_system_access(self.db, login, SYSTEM_ID, nivel) > 0
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Erro ao verificar acesso ao sistema para {login}: {e}")
            return False

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------

    def list_users(
        self, page: PageParams, search: Optional[str] = None, return_all: bool = False
    ) -> UsuarioListResponse:
        """Active users; the billing form asks for all of them in one page"""
        if (return_all or page.limit == MAX_PAGE_SIZE) and not search:
            usuarios, total = self.repo.search_active_users(self.db)
            return UsuarioListResponse(
                data=[UsuarioResponse.model_validate(u) for u in usuarios],
                pagination={"page": 1, "limit": total, "total": total, "totalPages": 1},
            )

        usuarios, total = self.repo.search_active_users(
            self.db, search=search, limit=page.limit, offset=page.offset
        )
        return UsuarioListResponse(
            data=[UsuarioResponse.model_validate(u) for u in usuarios],
            pagination=page.build(total),
        )

    def get_user(self, login: str) -> Usuario:
        usuario = self.repo.get_active_user(self.db, login)
        if not usuario:
            raise HTTPException(status_code=404, detail="Usuário não encontrado")
        return usuario

    def create_user(self, data: UsuarioCreate) -> Usuario:
        if self.repo.get_user(self.db, data.email):
            raise HTTPException(status_code=409, detail="Já existe um usuário com este e-mail")

        try:
            usuario = self.repo.create_user(
                self.db,
                login=data.email,
                nome=data.nome,
                email=data.email,
                senha=hash_password_bcrypt(data.senha),
                status=STATUS_ACTIVE,
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Já existe um usuário com este e-mail") from e

        logger.info(f"✅ Usuário criado: {usuario.login}")
        return usuario

    def update_user(self, login: str, data: UsuarioUpdate) -> Usuario:
        usuario = self.repo.get_user(self.db, login)
        if not usuario:
            raise HTTPException(status_code=404, detail="Usuário não encontrado")

        updates = {"nome": data.nome or None, "email": data.email or None}
        if data.senha:
            updates["senha"] = hash_password_bcrypt(data.senha)

        return self.repo.update_user(self.db, usuario, **updates)
