"""
BileMo API — Customer Service
===============================

What:  Customer CRUD for administrators, plus linking existing users to a
       customer through the optional `idUser` field.

Cache tags:
    Customer writes evict `customersCache`. The user view does not embed
    customers, so linking a user to a customer leaves `usersCache` intact.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ListCache
from app.exceptions import ValidationFailedError
from app.models import Customer, User
from app.repositories import CustomerRepository, UserRepository
from app.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate, CustomerWrite
from app.schemas.views import customer_view, render_page
from app.security.passwords import hash_password
from app.services.validation import UNIQUE_EMAIL_MESSAGE, merge_changes, revalidate

logger = logging.getLogger(__name__)

KIND = "customers"


class CustomerService:

    async def list_customers(
        self, db: AsyncSession, cache: ListCache, page: int, limit: int
    ) -> str:
        async def load() -> str:
            customers = await CustomerRepository(db).find_all_with_pagination(page, limit)
            return render_page([customer_view(c) for c in customers])

        return await cache.get(KIND, page, limit, load)

    async def get_customer(self, db: AsyncSession, customer_id: int) -> CustomerRead:
        customer = await CustomerRepository(db).get(customer_id)
        return customer_view(customer)

    async def create_customer(
        self, db: AsyncSession, cache: ListCache, payload: CustomerCreate
    ) -> CustomerRead:
        """
        Persists a new customer.

        Raises:
            ValidationFailedError: email already used by another customer
            NotFoundError: `idUser` given but no such user
        """
        repository = CustomerRepository(db)
        if await repository.email_taken(payload.email):
            raise ValidationFailedError.single("email", UNIQUE_EMAIL_MESSAGE)

        linked = await self._linked_user(db, payload.id_user)
        customer = Customer(
            name=payload.name,
            email=payload.email,
            stored_roles=list(payload.roles),
            password=hash_password(payload.password),
            users=[linked] if linked else [],
        )
        await repository.add(customer)
        await db.commit()
        cache.invalidate(KIND)
        logger.info("Customer %s created", customer.id)
        return customer_view(customer)

    async def update_customer(
        self,
        db: AsyncSession,
        cache: ListCache,
        customer_id: int,
        changes: CustomerUpdate,
    ) -> None:
        repository = CustomerRepository(db)
        customer = await repository.get(customer_id)
        current = {
            "name": customer.name,
            "email": customer.email,
            "roles": list(customer.stored_roles or []),
        }
        valid = revalidate(CustomerWrite, merge_changes(current, changes))
        if await repository.email_taken(valid.email, exclude_id=customer.id):
            raise ValidationFailedError.single("email", UNIQUE_EMAIL_MESSAGE)

        # Resolved before mutating so an unknown idUser leaves the row as it was
        linked = await self._linked_user(db, changes.id_user)

        customer.name = valid.name
        customer.email = valid.email
        customer.stored_roles = list(valid.roles)
        if linked is not None:
            customer.add_user(linked)
        customer.touch()
        await db.commit()
        cache.invalidate(KIND)
        logger.info("Customer %s updated", customer_id)

    async def delete_customer(
        self, db: AsyncSession, cache: ListCache, customer_id: int
    ) -> None:
        repository = CustomerRepository(db)
        customer = await repository.get(customer_id)
        await repository.delete(customer)
        await db.commit()
        cache.invalidate(KIND)
        logger.info("Customer %s deleted", customer_id)

    async def _linked_user(self, db: AsyncSession, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return await UserRepository(db).get(user_id)


customer_service = CustomerService()
