import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import STATUS_ACTIVE, Usuario
from .security_utils import decode_session_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Usuario:
    """Resolve the session token issued by /auth/login to an active user"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Usuário não autenticado",
            headers={"WWW-Authenticate": "Bearer"},
        )

    login = decode_session_token(credentials.credentials)
    if not login:
        logger.warning("⚠️ Token de sessão inválido ou expirado")
        raise HTTPException(
            status_code=401,
            detail="Sessão inválida ou expirada",
            headers={"WWW-Authenticate": "Bearer"},
        )

    usuario = (
        db.query(Usuario)
        .filter(Usuario.login == login, Usuario.status == STATUS_ACTIVE)
        .first()
    )
    if not usuario:
        logger.warning(f"⚠️ Token válido para usuário inexistente ou inativo: {login}")
        raise HTTPException(status_code=401, detail="Usuário não encontrado ou inativo")

    logger.debug(f"✅ User authenticated: {usuario.login}")
    return usuario
