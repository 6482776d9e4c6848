# backend/core/auth.py
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from firebase_admin import auth

from core.db import get_salon_id_for_owner


# Define o esquema de autenticação.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)

async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)):
    """
    Dependência FastAPI: valida o token Firebase ID e devolve o token decodificado.
    (Status de assinatura não é verificado aqui.)
    """

    # Preflight OPTIONS passa direto
    if request.method == "OPTIONS":
        logging.debug("OPTIONS request received, bypassing token validation.")
        return None

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials / Token missing or invalid",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        logging.warning("Authentication token not provided for non-OPTIONS request.")
        raise credentials_exception

    try:
        return auth.verify_id_token(token)
    except auth.ExpiredIdTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expirado")
    except auth.InvalidIdTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido")
    except Exception as e:
        logging.error(f"Unexpected error during token verification: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erro interno de autenticação")


async def get_current_salon_id(current_user: Optional[dict] = Depends(get_current_user)) -> Optional[str]:
    """Resolve o salão do dono logado; 404 se a conta ainda não tem salão."""
    # Preflight OPTIONS chega sem usuário
    if current_user is None:
        return None
    uid = current_user['uid']
    salao_id = get_salon_id_for_owner(uid)
    if not salao_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Nenhum salão encontrado para esta conta."
        )
    return salao_id
