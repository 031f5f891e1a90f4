"""
BileMo API — Authentication Dependencies
==========================================

What:  FastAPI dependencies that turn a bearer token into a Principal and
       gate routes on the authorization policy.
How:   `get_current_principal` decodes the JWT, then re-loads the account so
       a deleted customer's token stops working and role changes apply
       immediately. `authorized(resource, action)` builds a dependency that
       also runs the role check before the route body executes.

Example usage in a route:
    @router.get("/products")
    async def list_products(
        principal: Principal = Depends(authorized("products", Action.LIST)),
    ): ...
"""

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import UnauthorizedError
from app.repositories import AdminRepository, CustomerRepository
from app.security.authorization import Action, Principal, PrincipalKind, authorize
from app.security.tokens import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must produce our 401 body, not
# FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(message="JWT Token not found")

    claims = decode_access_token(credentials.credentials)
    kind = PrincipalKind(claims["principal"])
    repository = (
        CustomerRepository(db) if kind is PrincipalKind.CUSTOMER else AdminRepository(db)
    )
    account = await repository.find_by_email(claims["sub"])
    if account is None:
        logger.warning("Token for unknown %s account %s", kind.value, claims["sub"])
        raise UnauthorizedError(message="Account no longer exists")

    return Principal(
        kind=kind,
        id=account.id,
        email=account.email,
        roles=tuple(account.roles),
    )


def authorized(resource: str, action: Action) -> Callable:
    """Dependency factory: resolves the principal and checks its role."""

    async def dependency(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        authorize(principal, action, resource)
        return principal

    return dependency
