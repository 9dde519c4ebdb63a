"""API Dependencies: bearer authentication and shared collaborators.

Invariants:
    - get_current_claims raises UnauthenticatedError for a missing, malformed,
      expired or forged token; it never touches the database
    - TokenIssuer and PasswordHasher are built once per process from settings
"""

from functools import lru_cache

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studyhub.config import get_settings
from studyhub.core.errors import UnauthenticatedError
from studyhub.infrastructure.passwords import PasswordHasher
from studyhub.infrastructure.tokens import Claims, TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    settings = get_settings()
    return TokenIssuer(
        settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expire_days,
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(get_settings().password_hash_rounds)


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Claims:
    """Verified identity of the caller."""
    if credentials is None:
        raise UnauthenticatedError("No token")
    return tokens.verify(credentials.credentials)
