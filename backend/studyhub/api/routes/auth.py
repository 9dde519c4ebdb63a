"""Auth Routes: register, login, and who-am-i.

Invariants:
    - register returns 201 with a token; duplicate email is 409
    - login failures are 401 with one generic message
    - /me echoes token claims without a database lookup
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.api.dependencies import (
    get_current_claims, get_password_hasher, get_token_issuer,
)
from studyhub.infrastructure.database import get_db
from studyhub.infrastructure.passwords import PasswordHasher
from studyhub.infrastructure.tokens import Claims, TokenIssuer
from studyhub.models.user import User
from studyhub.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from studyhub.services.credentials import CredentialService

router = APIRouter(prefix="/api", tags=["auth"])


def _credentials(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> CredentialService:
    return CredentialService(db, hasher, tokens)


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        token=token,
        user=UserResponse(id=user.id, email=user.email, display_name=user.display_name),
    )


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest, credentials: CredentialService = Depends(_credentials),
):
    user, token = await credentials.register(body.email, body.password, body.display_name)
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest, credentials: CredentialService = Depends(_credentials),
):
    user, token = await credentials.login(body.email, body.password)
    return _auth_response(user, token)


@router.get("/me", response_model=UserResponse)
async def me(claims: Claims = Depends(get_current_claims)):
    return UserResponse(id=claims.id, email=claims.email, display_name=claims.display_name)
