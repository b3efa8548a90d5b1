"""
Core Authentication Module
==========================

Contains the authentication components of the Membaza Users API:
- authenticator: Login, refresh and logout orchestration
- passwords: bcrypt password hashing
- tokens: JWT issuance and validation
- user_store: User record lookup (in-memory or Redis)
"""

from core.authenticator import Authenticator, assert_user_status
from core.passwords import PasswordHasher, create_password_hasher
from core.tokens import JwtService, create_jwt_service
from core.user_store import (
    InMemoryUserStore,
    RedisUserStore,
    UserStore,
    create_user_store,
)

__all__ = [
    'Authenticator',
    'assert_user_status',
    'PasswordHasher',
    'create_password_hasher',
    'JwtService',
    'create_jwt_service',
    'UserStore',
    'InMemoryUserStore',
    'RedisUserStore',
    'create_user_store',
]
