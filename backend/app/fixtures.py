"""
BileMo API — Sample Data Loader
=================================

What:  Seeds a development database with an admin, a few customers, users
       and a page-worth of products.
How:   `python -m app.fixtures` (after `alembic upgrade head`). Rows are only
       inserted into empty tables, so running it twice is harmless.

Seeded logins (password "password" for all):
    admin@bilemo.com   → ROLE_ADMIN
    free@free.com      → customer "Free", owns two users
"""

import asyncio
import logging
import sys
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session_factory, dispose_engine
from app.models import Admin, Customer, Product, User
from app.security.passwords import hash_password

logger = logging.getLogger(__name__)

FIXTURE_PASSWORD = "password"
CUSTOMER_COUNT = 20
USER_COUNT = 5
PRODUCT_COUNT = 20


async def load_fixtures(session: AsyncSession) -> bool:
    """
    Inserts the sample rows.

    Returns:
        False when the database already holds customers (nothing inserted).
    """
    existing = await session.scalar(select(func.count()).select_from(Customer))
    if existing:
        logger.info("Database already seeded (%d customers), skipping", existing)
        return False

    hashed = hash_password(FIXTURE_PASSWORD)

    session.add(
        Admin(
            email="admin@bilemo.com",
            firstname="Marlene",
            lastname="Admin",
            password=hashed,
        )
    )

    henry = User(email="henry.dupont@example.com", firstname="Henry", lastname="Dupont")
    henriette = User(email="henriette.dupont@example.com", firstname="Henriette", lastname="Dupont")
    session.add(Customer(name="Free", email="free@free.com", password=hashed, users=[henry, henriette]))

    users = [
        User(email=f"user{i}@example.com", firstname=f"Firstname {i}", lastname=f"Lastname {i}")
        for i in range(USER_COUNT)
    ]
    for i in range(CUSTOMER_COUNT):
        session.add(
            Customer(
                name=f"Customer {i}",
                email=f"customer{i}@example.com",
                password=hashed,
                users=[users[i % USER_COUNT]],
            )
        )

    for i in range(PRODUCT_COUNT):
        session.add(
            Product(
                name=f"Phone {i}",
                description=f"Description {i}",
                price=Decimal(100 + i * 10),
            )
        )

    await session.commit()
    logger.info(
        "Seeded 1 admin, %d customers, %d users, %d products",
        CUSTOMER_COUNT + 1,
        USER_COUNT + 2,
        PRODUCT_COUNT,
    )
    return True


async def main() -> None:
    async with async_session_factory() as session:
        await load_fixtures(session)
    await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    asyncio.run(main())
