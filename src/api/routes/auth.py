from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from src.adapters.auth.local_auth import LocalAuthService
from src.api.deps import CurrentSession, get_auth_service, get_rules
from src.api.schemas import (
    MeResponse,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    SignUpRequest,
    Token,
)
from src.components.bootstrap import (
    PasswordResetInput,
    SignInInput,
    SignUpInput,
    run_complete_password_reset,
    run_password_reset,
    run_sign_in,
    run_sign_up,
)
from src.domain.entities import Session
from src.rules.models import Rules

router = APIRouter()


def _session_response(response: Response, session: Session, rules: Rules) -> Token:
    max_age = rules.sessions.ttl_minutes * 60
    response.set_cookie(
        key="access_token",
        value=f"Bearer {session.access_token}",
        httponly=True,
        max_age=max_age,
        expires=max_age,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )
    return Token(access_token=session.access_token, expires_at=session.expires_at.isoformat())


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignUpRequest,
    response: Response,
    auth: LocalAuthService = Depends(get_auth_service),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Create the owner account. Only allowed while no account exists."""
    session = run_sign_up(
        SignUpInput(
            email=body.email, password=body.password, confirm_password=body.confirm_password
        ),
        auth,
        rules.owner,
    )
    return _session_response(response, session, rules)


@router.post("/login", response_model=Token)
def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth: LocalAuthService = Depends(get_auth_service),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate the owner and return an access token."""
    session = run_sign_in(
        SignInInput(email=form_data.username, password=form_data.password), auth
    )
    return _session_response(response, session, rules)


@router.post("/logout")
def logout(
    response: Response,
    session: CurrentSession,
    auth: LocalAuthService = Depends(get_auth_service),
) -> dict[str, str]:
    """Clear the cookie; an authenticated caller also ends the owner session."""
    if session is not None:
        auth.sign_out()
    response.delete_cookie(key="access_token")
    return {"status": "success"}


@router.post("/reset-password", status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(
    body: PasswordResetRequest,
    request: Request,
    auth: LocalAuthService = Depends(get_auth_service),
    rules: Rules = Depends(get_rules),
) -> dict[str, str]:
    """Email a reset link. Same response whether or not the address is known.

    A caller-supplied redirect_to must be on this API's origin or on one of
    owner.allowed_redirect_origins.
    """
    base_url = str(request.base_url).rstrip("/")
    redirect_to = body.redirect_to or base_url + rules.owner.reset_redirect_path
    run_password_reset(
        PasswordResetInput(email=body.email, redirect_to=redirect_to),
        auth,
        allowed_origins=[base_url, *rules.owner.allowed_redirect_origins],
    )
    return {"status": "sent"}


@router.post("/reset-password/confirm")
def confirm_password_reset(
    body: PasswordResetConfirmRequest,
    auth: LocalAuthService = Depends(get_auth_service),
    rules: Rules = Depends(get_rules),
) -> dict[str, str]:
    run_complete_password_reset(body.token, body.password, auth, rules.owner)
    return {"status": "success"}


@router.get("/me", response_model=MeResponse)
def read_me(session: CurrentSession) -> MeResponse:
    """Get the current owner session."""
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return MeResponse(
        account_id=str(session.account_id),
        email=session.email,
        expires_at=session.expires_at.isoformat(),
    )
