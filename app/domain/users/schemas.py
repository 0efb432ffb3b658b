"""User domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.pagination import Pagination
from ...shared.validators import validate_email


class LoginRequest(BaseModel):
    login: str
    senha: str


class AuthUser(BaseModel):
    """Authenticated user as seen by the panel"""

    login: str
    nome: str
    email: Optional[str] = None
    isAdmin: bool
    hasSystemAccess: bool
    userLevel: str


class SessionUser(AuthUser):
    """AuthUser plus the per-system access flags from usuario_sistema"""

    systemAccess: bool
    isSystemAdmin: bool


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AuthUser


class UsuarioCreate(BaseModel):
    """Schema for creating a user; the e-mail doubles as login"""

    nome: str
    email: str
    senha: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("senha")
    @classmethod
    def check_senha(cls, v):
        if len(v) < 6:
            raise ValueError("A senha deve ter pelo menos 6 caracteres")
        return v


class UsuarioUpdate(BaseModel):
    nome: Optional[str] = None
    email: Optional[str] = None
    senha: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class UsuarioResponse(BaseModel):
    login: str
    nome: str
    email: Optional[str] = None
    status: str

    class Config:
        from_attributes = True


class UsuarioListResponse(BaseModel):
    data: list[UsuarioResponse]
    pagination: Pagination
