"""Session login, magic links and the request identity dependencies."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from council.api.deps import get_db_session, get_mailer
from council.core.config import Settings, get_settings
from council.models import PERMISSION_FLAGS, User
from council.schemas.auth import LoginRequest, MagicLinkRequest, MessageResponse
from council.schemas.user import UserRead
from council.services import sessions as session_service
from council.services.mailer import BrevoMailer

logger = logging.getLogger(__name__)

router = APIRouter()
security_scheme = HTTPBearer(auto_error=False)

MAGIC_LINK_MESSAGE = "If an account exists for this address, a sign-in link has been sent."


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: int
    email: str
    role: str
    roles: frozenset[str]
    company_id: int | None
    permissions: frozenset[str]
    session_id: str
    is_staff: bool = field(default=False)

    @classmethod
    def from_user(cls, user: User, *, session_id: str, settings: Settings) -> "AuthenticatedUser":
        roles = frozenset(user.role_names())
        granted = frozenset(
            flag for flag, enabled in (user.permissions or {}).items() if enabled and flag in PERMISSION_FLAGS
        )
        return cls(
            user_id=user.id,
            email=user.email,
            role=user.role,
            roles=roles,
            company_id=user.company_id,
            permissions=granted,
            session_id=session_id,
            is_staff=bool(roles & set(settings.staff_roles)),
        )

    def can(self, flag: str) -> bool:
        return flag in self.permissions


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_days * 24 * 3600,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def _request_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    session: Session = Depends(get_db_session),
) -> AuthenticatedUser:
    settings = get_settings()
    token = _request_token(request, credentials)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        user, session_id = session_service.resolve_session(session, token=token, settings=settings)
    except session_service.AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    request.state.actor_id = user.id
    return AuthenticatedUser.from_user(user, session_id=session_id, settings=settings)


def require_permission(*flags: str) -> Callable[..., AuthenticatedUser]:
    required: set[str] = set(flags)

    def dependency(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if not required <= user.permissions:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return dependency


@router.post("/login", response_model=UserRead, summary="Open a session with e-mail and password")
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_db_session),
) -> UserRead:
    settings = get_settings()
    try:
        user = session_service.authenticate(session, email=payload.email, password=payload.password)
    except session_service.InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from exc
    issued = session_service.create_session(session, user=user, settings=settings)
    _set_session_cookie(response, issued.token, settings)
    logger.info("login succeeded", extra={"user_id": user.id})
    return UserRead.model_validate(user)


@router.post("/logout", response_model=MessageResponse, summary="Close the current session")
def logout(
    request: Request,
    response: Response,
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    session: Session = Depends(get_db_session),
) -> MessageResponse:
    settings = get_settings()
    token = _request_token(request, credentials)
    if token:
        session_service.revoke_session(session, token=token, settings=settings)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserRead, summary="Profile of the signed-in user")
def me(
    user: AuthenticatedUser = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> UserRead:
    return UserRead.model_validate(session.get(User, user.user_id))


@router.post("/send-magic-link", response_model=MessageResponse, summary="E-mail a one-time sign-in link")
def send_magic_link(
    payload: MagicLinkRequest,
    request: Request,
    session: Session = Depends(get_db_session),
    mailer: BrevoMailer = Depends(get_mailer),
) -> MessageResponse:
    settings = get_settings()
    user = session_service.find_user_by_email(session, payload.email)
    if user is not None:
        token = session_service.create_magic_link_token(user=user, settings=settings)
        link = f"{str(request.base_url).rstrip('/')}/api/auth/magic-link?{urlencode({'token': token})}"
        delivered = mailer.send_magic_link(to_email=user.email, to_name=user.display_name, link=link)
        logger.info("magic link requested", extra={"user_id": user.id, "delivered": delivered})
    return MessageResponse(message=MAGIC_LINK_MESSAGE)


@router.get("/magic-link", summary="Exchange a magic-link token for a session")
def consume_magic_link(
    token: str = Query(..., min_length=1),
    session: Session = Depends(get_db_session),
) -> RedirectResponse:
    settings = get_settings()
    try:
        issued = session_service.consume_magic_link(session, token=token, settings=settings)
    except session_service.UnknownUserError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except session_service.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired link") from exc
    redirect = RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)
    _set_session_cookie(redirect, issued.token, settings)
    return redirect


__all__ = [
    "AuthenticatedUser",
    "get_current_user",
    "require_permission",
    "router",
]
