# app/api/deps.py
import random
from functools import lru_cache

from fastapi import Depends, Request

from app.domain.errors import AuthError
from app.domain.schemas import PrincipalOut
from app.services.session_service import SessionService
from app.utils.settings import SESSION_COOKIE_NAME, STOCK_POLICY


@lru_cache
def get_session_service() -> SessionService:
    #jeden klient redisa (pula polaczen) na proces
    return SessionService()


def get_rng() -> random.Random:
    return random.Random()


def get_stock_policy() -> str:
    return STOCK_POLICY


def get_session_id(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME)


def get_principal(
    session_id: str | None = Depends(get_session_id),
    sessions: SessionService = Depends(get_session_service),
) -> PrincipalOut | None:
    return sessions.get(session_id)


def require_principal(principal: PrincipalOut | None = Depends(get_principal)) -> PrincipalOut:
    if principal is None:
        raise AuthError("Not authenticated")
    return principal
