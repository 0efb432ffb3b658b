"""User router - login, session and user management endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW
from ...database import get_db
from ...models import Usuario
from ...rate_limiter import create_rate_limiter, get_client_ip
from ...shared.pagination import PageParams
from .schemas import (
    LoginRequest,
    LoginResponse,
    SessionUser,
    UsuarioCreate,
    UsuarioListResponse,
    UsuarioResponse,
    UsuarioUpdate,
)
from .service import UserService

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
router = APIRouter(prefix="/usuarios", tags=["Usuarios"])

rate_limit_login = create_rate_limiter(
    limit=LOGIN_RATE_LIMIT, window_seconds=LOGIN_RATE_WINDOW, key_prefix="login"
)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


# ============================================================================
# AUTHENTICATION
# ============================================================================


@auth_router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    request: Request,
    _: None = Depends(rate_limit_login),
    service: UserService = Depends(get_user_service),
):
    """Authenticate against the legacy user store and open a session"""
    return service.authenticate(data.login, data.senha, ip_address=get_client_ip(request))


@auth_router.get("/me", response_model=SessionUser)
async def me(
    current_user: Usuario = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Profile and access level of the session user"""
    auth_user = service.build_auth_user(current_user)
    return SessionUser(
        **auth_user.model_dump(),
        systemAccess=service.check_user_admin(current_user.login),
        isSystemAdmin=service.check_user_system_admin(current_user.login),
    )


# ============================================================================
# USER MANAGEMENT
# ============================================================================


@router.get("", response_model=UsuarioListResponse)
async def list_usuarios(
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    return_all: bool = Query(False, alias="all"),
    _current_user: Usuario = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Active users, paginated; `all=true` returns every active user"""
    return service.list_users(page, search=search, return_all=return_all)


@router.post("", response_model=UsuarioResponse, status_code=201)
async def create_usuario(
    data: UsuarioCreate,
    _current_user: Usuario = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.create_user(data)


@router.get("/{login}", response_model=UsuarioResponse)
async def get_usuario(
    login: str,
    _current_user: Usuario = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.get_user(login)


@router.patch("/{login}", response_model=UsuarioResponse)
async def update_usuario(
    login: str,
    data: UsuarioUpdate,
    _current_user: Usuario = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.update_user(login, data)
