"""Token Issuer: mints and verifies signed session tokens (JWT).

Invariants:
    - Tokens carry id, email, display_name, iat and exp claims
    - Lifetime is fixed at issue time (no refresh)
    - verify() never consults the database: claims are advisory identity
    - Every failure (signature, expiry, malformed, missing claims) raises UnauthenticatedError
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from studyhub.core.errors import UnauthenticatedError

REQUIRED_CLAIMS = ("id", "email", "display_name", "exp")


@dataclass(frozen=True)
class Claims:
    """Identity asserted by a verified token."""
    id: int
    email: str
    display_name: str
    expires_at: datetime


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(days=expire_days)

    def issue(self, user_id: int, email: str, display_name: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "email": email,
            "display_name": display_name,
            "iat": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Claims:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError("Token expired")
        except jwt.InvalidTokenError:
            raise UnauthenticatedError("Invalid token")

        user_id = payload["id"]
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise UnauthenticatedError("Invalid token payload")
        return Claims(
            id=user_id,
            email=str(payload["email"]),
            display_name=str(payload["display_name"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
