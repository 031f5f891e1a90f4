"""
BileMo API — User Service
===========================

What:  User CRUD for customers, with ownership enforced on every operation
       that targets a single user.
Who:   Called by the /api/users route handlers.

Ownership flow (detail, update, delete):
    1. Load the user → NotFoundError (404) when absent
    2. authorize(principal, action, "users", target=user) → ForbiddenError (403)
       unless the principal is one of the user's customers
    3. Perform the operation

Cache tags:
    User writes evict `usersCache` and, because customer pages embed user
    summaries, `customersCache` as well (see app.schemas.views.EMBEDS).
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ListCache
from app.exceptions import ValidationFailedError
from app.models import Customer, User
from app.repositories import CustomerRepository, UserRepository
from app.schemas.user import UserCreate, UserRead, UserUpdate, UserWrite
from app.schemas.views import render_page, user_view
from app.security.authorization import POLICY, Action, Principal, authorize
from app.services.validation import UNIQUE_EMAIL_MESSAGE, merge_changes, revalidate

logger = logging.getLogger(__name__)

KIND = "users"

# Cached pages are shared by every caller admitted to the list route, so
# they are rendered for that route's minimum role rather than the caller's.
LIST_VIEWER_ROLES = (POLICY[(KIND, Action.LIST)].role,)


class UserService:

    async def list_users(
        self, db: AsyncSession, cache: ListCache, page: int, limit: int
    ) -> str:
        async def load() -> str:
            users = await UserRepository(db).find_all_with_pagination(page, limit)
            return render_page([user_view(u, LIST_VIEWER_ROLES) for u in users])

        return await cache.get(KIND, page, limit, load)

    async def get_user(
        self, db: AsyncSession, principal: Principal, user_id: int
    ) -> UserRead:
        user = await UserRepository(db).get(user_id)
        authorize(principal, Action.DETAIL, KIND, target=user)
        return user_view(user, principal.roles)

    async def create_user(
        self,
        db: AsyncSession,
        cache: ListCache,
        principal: Principal,
        payload: UserCreate,
    ) -> UserRead:
        """
        Persists a new user linked to its owning customer.

        The owner is the acting customer. An admin has no customer of its
        own and may name one with `idCustomer`; without it the user starts
        unowned and only an admin-side relink (PUT /api/customers/{id}
        with idUser) can attach it.
        """
        repository = UserRepository(db)
        if await repository.email_taken(payload.email):
            raise ValidationFailedError.single("email", UNIQUE_EMAIL_MESSAGE)

        owners: List[Customer] = []
        if principal.is_customer:
            owners.append(await CustomerRepository(db).get(principal.id))
        elif payload.id_customer is not None:
            owners.append(await CustomerRepository(db).get(payload.id_customer))

        user = User(
            email=payload.email,
            firstname=payload.firstname,
            lastname=payload.lastname,
            stored_roles=list(payload.roles),
            customers=owners,
        )
        await repository.add(user)
        await db.commit()
        cache.invalidate(KIND)
        logger.info("User %s created by %s", user.id, principal.email)
        return user_view(user, principal.roles)

    async def update_user(
        self,
        db: AsyncSession,
        cache: ListCache,
        principal: Principal,
        user_id: int,
        changes: UserUpdate,
    ) -> None:
        repository = UserRepository(db)
        user = await repository.get(user_id)
        authorize(principal, Action.UPDATE, KIND, target=user)

        current = {
            "email": user.email,
            "firstname": user.firstname,
            "lastname": user.lastname,
        }
        valid = revalidate(UserWrite, merge_changes(current, changes))
        if await repository.email_taken(valid.email, exclude_id=user.id):
            raise ValidationFailedError.single("email", UNIQUE_EMAIL_MESSAGE)

        user.email = valid.email
        user.firstname = valid.firstname
        user.lastname = valid.lastname
        user.touch()
        await db.commit()
        cache.invalidate(KIND)
        logger.info("User %s updated by %s", user_id, principal.email)

    async def delete_user(
        self,
        db: AsyncSession,
        cache: ListCache,
        principal: Principal,
        user_id: int,
    ) -> None:
        repository = UserRepository(db)
        user = await repository.get(user_id)
        authorize(principal, Action.DELETE, KIND, target=user)
        await repository.delete(user)
        await db.commit()
        cache.invalidate(KIND)
        logger.info("User %s deleted by %s", user_id, principal.email)


user_service = UserService()
