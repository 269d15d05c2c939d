import logging
from datetime import datetime, timezone

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.rate_limit import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from app.schemas.user import (
    LoginRequest,
    RegisterRequest,
    SessionOut,
    TokenResponse,
    UserBrief,
    UserOut,
)
from app.services import session_events
from app.services.auth_service import (
    create_access_token,
    decode_token,
    hash_password,
    normalize_email,
    token_expiry,
    verify_password,
)
from app.services.session_events import SessionEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_session(
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
) -> tuple[User, dict]:
    if not credentials:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid token")

    try:
        user_id = int(payload.get("sub", ""))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token")

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise _unauthorized("User not found or inactive")
    return user, payload


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Auth dependency. Returns the authenticated User."""
    user, _ = _decode_session(credentials, db)
    return user


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id),
        user=UserBrief.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
@limiter.limit(REGISTER_LIMIT)
def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    """Sign up with email and password. Returns a token for the new account."""
    if not settings.registration_enabled:
        raise HTTPException(status_code=403, detail="Registration is disabled")

    email = normalize_email(data.email)
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        display_name=data.display_name or email.split("@", 1)[0],
        password_hash=hash_password(data.password),
        last_login=datetime.now(timezone.utc),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")
    db.refresh(user)

    logger.info("Registered user %d", user.id)
    session_events.publish(SessionEvent(kind="signed_up", user_id=user.id, email=user.email))
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(LOGIN_LIMIT)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    """Sign in with email and password."""
    email = normalize_email(data.email)
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt for: %s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    user.last_login = datetime.now(timezone.utc)
    db.commit()

    session_events.publish(SessionEvent(kind="signed_in", user_id=user.id, email=user.email))
    return _token_response(user)


@router.get("/session", response_model=SessionOut)
def get_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    """Return the session behind the current bearer token."""
    user, payload = _decode_session(credentials, db)
    return SessionOut(user=UserOut.model_validate(user), expires_at=token_expiry(payload))


@router.post("/logout", status_code=204)
def logout(user: User = Depends(require_auth)):
    # Tokens are stateless; the client discards its copy.
    session_events.publish(SessionEvent(kind="signed_out", user_id=user.id, email=user.email))
