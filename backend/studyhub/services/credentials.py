"""Credential Store: registration and login against the users table.

Invariants:
    - One row per email: checked before insert and enforced by the unique index,
      so a concurrent duplicate registration ends in ConflictError, never a second row
    - Unknown email and wrong password produce the same UnauthenticatedError
    - Password hashing runs in a worker thread (CPU-bound, would stall the event loop)

Design Decisions:
    - Service commits its own unit of work: registration is a single insert
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.core.errors import ConflictError, UnauthenticatedError
from studyhub.infrastructure.passwords import PasswordHasher
from studyhub.infrastructure.tokens import TokenIssuer
from studyhub.models.user import User

logger = logging.getLogger(__name__)


class CredentialService:
    """Register and authenticate users, returning a signed token."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher, tokens: TokenIssuer):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self, email: str, password: str, display_name: str,
    ) -> tuple[User, str]:
        if await self._find_by_email(email):
            raise ConflictError("Email in use")

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        user = User(
            email=email, password_hash=password_hash, display_name=display_name,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email in use")

        logger.info("User registered", extra={"user_id": user.id})
        return user, self._token_for(user)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await self._find_by_email(email)
        if user is None:
            await asyncio.to_thread(self.hasher.dummy_verify)
            raise UnauthenticatedError("Invalid credentials")
        ok = await asyncio.to_thread(self.hasher.verify, password, user.password_hash)
        if not ok:
            raise UnauthenticatedError("Invalid credentials")
        return user, self._token_for(user)

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    def _token_for(self, user: User) -> str:
        return self.tokens.issue(user.id, user.email, user.display_name)
