# app/api/routers/auth.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_principal, get_session_id, get_session_service, require_principal
from app.data.database import get_db
from app.domain.schemas import CredentialsIn, LoginOut, MessageOut, PrincipalOut
from app.services.auth_service import AuthService, user_out
from app.services.session_service import SessionService
from app.utils.settings import SESSION_COOKIE_NAME

router = APIRouter(tags=["auth"])


def _start_session(response: Response, sessions: SessionService, user_id: int, role: str) -> None:
    session_id = sessions.create(user_id, role)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_id,
        max_age=sessions.ttl,
        httponly=True,
        samesite="lax",
    )


@router.post("/api/signup", response_model=MessageOut, status_code=201)
def signup(
    payload: CredentialsIn,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
):
    user = AuthService(db).register(payload.username, payload.password)
    _start_session(response, sessions, user.id, user.role)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginOut)
def login(
    payload: CredentialsIn,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
):
    user = AuthService(db).authenticate(payload.username, payload.password)
    _start_session(response, sessions, user.id, user.role)
    return {"message": "Login successful!", "user": user_out(user)}


@router.post("/api/logout", response_model=MessageOut)
def logout(
    response: Response,
    session_id: str | None = Depends(get_session_id),
    sessions: SessionService = Depends(get_session_service),
):
    sessions.destroy(session_id)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logout Successful!"}


@router.get("/api/check-authentication")
def check_authentication(principal: PrincipalOut | None = Depends(get_principal)):
    #200 zalogowany, 204 nie - bez body
    return Response(status_code=200 if principal else 204)


@router.get("/api/me", response_model=PrincipalOut)
def me(principal: PrincipalOut = Depends(require_principal)):
    return principal
