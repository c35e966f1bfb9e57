import datetime
import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from healthchat.db.session import get_db
from healthchat.models.user import User, PasswordResetToken
from healthchat.core.config import get_google_client_id, get_oauth_redirect_uri
from healthchat.core.security import hash_password, verify_password, create_token
from healthchat.api.deps import get_current_user
from healthchat.schemas.auth import (
    SignupRequest,
    LoginRequest,
    PasswordResetRequest,
    PasswordResetConfirmRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

RESET_TOKEN_TTL_MINUTES = 60
RESET_SENT_MESSAGE = "Check your email for instructions."
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"


def user_out(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name or "",
        "lastName": user.last_name or "",
        "name": user.display_name,
    }


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@router.post("/signup")
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    email = _normalize_email(data.email)
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="User already registered")
    user = User(
        email=email,
        password_hash=hash_password(data.password),
        first_name=(data.first_name or "").strip() or None,
        last_name=(data.last_name or "").strip() or None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Signed up user %s", user.id)
    return {"success": True, "user": user_out(user)}


@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == _normalize_email(data.email)).first()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    token = create_token({"sub": user.id, "type": "user"})
    return {"token": token, "user": user_out(user)}


@router.post("/password-reset")
def request_password_reset(data: PasswordResetRequest, db: Session = Depends(get_db)):
    """Same answer whether or not the email is registered."""
    user = db.query(User).filter(User.email == _normalize_email(data.email)).first()
    if user:
        reset = PasswordResetToken(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            expires_at=datetime.datetime.now(datetime.timezone.utc)
            + datetime.timedelta(minutes=RESET_TOKEN_TTL_MINUTES),
        )
        db.add(reset)
        db.commit()
        # No mail transport: the reset link goes to the log.
        logger.info("Password reset token issued for user %s: %s", user.id, reset.token)
    return {"success": True, "message": RESET_SENT_MESSAGE}


@router.post("/password-reset/confirm")
def confirm_password_reset(data: PasswordResetConfirmRequest, db: Session = Depends(get_db)):
    reset = db.query(PasswordResetToken).filter(PasswordResetToken.token == data.token).first()
    if not reset or reset.used:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    expires_at = reset.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=datetime.timezone.utc)
    if expires_at < datetime.datetime.now(datetime.timezone.utc):
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    user = db.query(User).filter(User.id == reset.user_id).first()
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    user.password_hash = hash_password(data.new_password)
    reset.used = True
    db.commit()
    logger.info("Password reset for user %s", user.id)
    return {"success": True}


@router.get("/oauth/{provider}")
def oauth_authorize(provider: str):
    if provider != "google":
        raise HTTPException(status_code=400, detail=f"Unsupported provider: {provider}")
    client_id = get_google_client_id()
    if not client_id:
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")
    params = {
        "client_id": client_id,
        "redirect_uri": get_oauth_redirect_uri(),
        "response_type": "code",
        "scope": "openid email profile",
        "state": secrets.token_urlsafe(16),
    }
    return {"provider": provider, "url": f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"user": user_out(user)}
