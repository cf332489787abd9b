# Backoffice/src/backoffice/routes/auth.py
# @ai-rules:
# 1. [Session store]: In-memory dict, per-process. Acceptable for a single back-office instance. No Redis.
# 2. [Password]: bcrypt hash held by the AdminRepository on app.state (admin_settings row id=1 in PostgreSQL).
# 3. [Cookie]: HTTP-only, SameSite=Lax, SESSION_MAX_AGE lifetime. No Secure flag (HTTP internal traffic).
# 4. [Gate]: Admin-only routes declare dependencies=[Depends(require_admin)].
"""Admin authentication endpoints and the admin gate dependency."""

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import SESSION_MAX_AGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

SESSION_COOKIE = "admin_session"
_sessions: dict[str, datetime] = {}


class LoginRequest(BaseModel):
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _check_password(request: Request, password: str) -> bool:
    stored_hash = request.app.state.admin_repository.get_password_hash()
    if not stored_hash:
        raise HTTPException(status_code=500, detail="Admin not configured")
    return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))


def _expire_sessions():
    """Remove sessions older than SESSION_MAX_AGE."""
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=SESSION_MAX_AGE)
    expired = [t for t, created in list(_sessions.items()) if created < cutoff]
    for t in expired:
        _sessions.pop(t, None)


def validate_session(request: Request) -> bool:
    """Check if the request has a valid admin session cookie."""
    _expire_sessions()
    token = request.cookies.get(SESSION_COOKIE)
    if not token or token not in _sessions:
        return False
    return True


def require_admin(request: Request) -> None:
    """FastAPI dependency guarding admin-only routes."""
    if not validate_session(request):
        raise HTTPException(status_code=401, detail="Not authenticated")


@router.post("/login")
def login(body: LoginRequest, request: Request):
    if not _check_password(request, body.password):
        logger.warning("Rejected admin login")
        raise HTTPException(status_code=401, detail="Invalid password")

    token = secrets.token_hex(32)
    _sessions[token] = datetime.now(timezone.utc)

    response = JSONResponse(content={"status": "logged_in"})
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/",
    )
    logger.info("Admin logged in")
    return response


@router.post("/logout")
def logout(request: Request):
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        _sessions.pop(token, None)

    response = JSONResponse(content={"status": "logged_out"})
    response.delete_cookie(
        key=SESSION_COOKIE,
        httponly=True,
        samesite="lax",
        path="/",
    )
    logger.info("Admin logged out")
    return response


@router.post("/change-password")
def change_password(body: ChangePasswordRequest, request: Request):
    require_admin(request)

    if not _check_password(request, body.current_password):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    request.app.state.admin_repository.set_password_hash(hash_password(body.new_password))
    logger.info("Admin password changed")
    return {"status": "password_changed"}
