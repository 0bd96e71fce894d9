# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.authentication import AuthContext, AuthenticationService
from .services.password_hashing import BcryptPasswordHasher
from .services.token_codec import JwtTokenCodec

__all__ = [
    "AuthContext",
    "AuthenticationService",
    "BcryptPasswordHasher",
    "JwtTokenCodec",
]
