"""
BileMo API — Authentication Service
=====================================

What:  Checks email/password credentials and issues a JWT.
How:   Customers are looked up first, then admins; both store bcrypt hashes.
       The same 401 is returned for an unknown email and a wrong password
       so the endpoint can't be used to probe which accounts exist.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UnauthorizedError
from app.repositories import AdminRepository, CustomerRepository
from app.security.authorization import PrincipalKind
from app.security.passwords import verify_password
from app.security.tokens import create_access_token

logger = logging.getLogger(__name__)


class AuthService:

    async def login(self, db: AsyncSession, username: str, password: str) -> str:
        candidates = (
            (PrincipalKind.CUSTOMER, CustomerRepository(db)),
            (PrincipalKind.ADMIN, AdminRepository(db)),
        )
        for kind, repository in candidates:
            account = await repository.find_by_email(username)
            if account is not None and verify_password(password, account.password):
                logger.info("Issued token for %s %s", kind.value, account.email)
                return create_access_token(account.email, kind.value, account.roles)

        logger.warning("Failed login attempt for %s", username)
        raise UnauthorizedError(message="Invalid credentials.")


auth_service = AuthService()
