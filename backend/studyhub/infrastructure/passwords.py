"""Password hashing via passlib.

Salted pbkdf2_sha256 with a tunable round count. dummy_verify() burns the
same time as a real check so unknown emails are not distinguishable by
latency.
"""

from passlib.context import CryptContext


class PasswordHasher:
    def __init__(self, rounds: int = 29_000):
        self._ctx = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._ctx.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._ctx.verify(password, password_hash)
        except ValueError:
            # unrecognized or corrupt hash in the store
            return False

    def dummy_verify(self) -> None:
        self._ctx.dummy_verify()
