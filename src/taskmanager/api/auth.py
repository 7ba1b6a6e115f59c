"""Auth API — registration, login, current user profile.

Learn: Routes for the account lifecycle:
- POST /register → create a new user account
- POST /login → username/password → JWT bearer token
- GET /profile → current user info (requires a token)

Failures are raised as exceptions from AuthService and turned into HTTP
responses by api.errors, so these handlers stay on the happy path.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.auth.dependencies import (
    get_current_user_id,
    get_password_hasher,
    get_token_service,
)
from taskmanager.auth.jwt import TokenService
from taskmanager.auth.password import PasswordHasher
from taskmanager.auth.service import AuthService, UserStore
from taskmanager.db.engine import get_db
from taskmanager.schemas.auth import (
    LoginRequest,
    LoginResponse,
    ProfileRead,
    RegisterRequest,
    RegisterResponse,
)
from taskmanager.services.user_service import UserService

router = APIRouter()


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserStore:
    return UserService(db)


def get_auth_service(
    users: UserStore = Depends(get_user_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(users, hasher, tokens)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(get_auth_service)):
    """Create a new user account."""
    user = await svc.register(body.username, body.email, body.password)
    return RegisterResponse(user=user)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    """Login with username and password → JWT token."""
    token, user = await svc.login(body.username, body.password)
    return LoginResponse(token=token, user=user)


# ─── Current user ───────────────────────────────────────


@router.get("/profile", response_model=ProfileRead)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    svc: AuthService = Depends(get_auth_service),
):
    """Get the current authenticated user's info."""
    return await svc.profile(user_id)
