"""
Authentication Routes

POST /auth/register - Register new user and get JWT token
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/complete-registration - Pick (or change) role after sign-up
"""

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from alumnisetu.db.mongodb import get_collection, COLLECTIONS
from alumnisetu.core.auth import hash_password, verify_password, create_access_token, get_current_user, session_user
from alumnisetu.core.config import get_settings
from alumnisetu.services.store import public_user
from alumnisetu.schemas.schemas import (
    RegisterRequest, LoginRequest, CompleteRegistrationRequest, TokenResponse, UserRole
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _check_admin_code(role: UserRole, admin_password: str) -> None:
    if role == UserRole.admin and admin_password != settings.admin_registration_code:
        raise HTTPException(status_code=403, detail="Invalid admin password")


def _token_for(user: dict) -> TokenResponse:
    token = create_access_token(data={"sub": str(user["_id"]), "role": user.get("role")})
    return TokenResponse(access_token=token, user=public_user(user))


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Registering as admin requires the admin passcode.
    """
    _check_admin_code(request.role, request.adminPassword)

    users = get_collection(COLLECTIONS["users"])
    email = request.email.lower()
    if users.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="User already exists")

    now = datetime.utcnow()
    user = {
        "email": email,
        "password": hash_password(request.password),
        "name": request.name,
        "role": request.role.value,
        "createdAt": now,
        "updatedAt": now
    }
    try:
        result = users.insert_one(user)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists")
    user["_id"] = result.inserted_id

    logger.info("Registered %s as %s", email, request.role.value)
    return _token_for(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = get_collection(COLLECTIONS["users"]).find_one({"email": request.email.lower()})

    if not user or not user.get("password"):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not verify_password(request.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return _token_for(user)


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return user


@router.post("/complete-registration")
async def complete_registration(request: CompleteRegistrationRequest, user: dict = Depends(get_current_user)):
    """Set the caller's role. Becoming admin requires the admin passcode."""
    _check_admin_code(request.role, request.adminPassword)

    users = get_collection(COLLECTIONS["users"])
    users.update_one(
        {"email": user["email"]},
        {"$set": {"role": request.role.value, "updatedAt": datetime.utcnow()}}
    )
    updated = users.find_one({"email": user["email"]})
    return {"success": True, "role": request.role.value, "user": session_user(updated)}
