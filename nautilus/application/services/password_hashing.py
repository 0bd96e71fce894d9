"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from nautilus.domain.users.repositories import PasswordHasher

# bcrypt only reads the first 72 bytes; existing hashes were made with that cut.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptPasswordHasher(PasswordHasher):
    """Salted bcrypt digests, compatible with existing ``$2a$``/``$2b$`` rows.

    ``verify`` returns ``False`` for a wrong password and for an empty or
    corrupt hash alike, so callers cannot tell the two apart.
    """

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return bool(bcrypt.checkpw(_encode(password), hashed.encode("utf-8")))
        except (ValueError, TypeError):
            return False
