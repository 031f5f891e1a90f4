"""
BileMo API — Service Unit Tests
=================================

What:  Tests for service-layer ordering rules without a database.
How:   Mock DB sessions and a mock list cache; entities are transient ORM
       instances with ids assigned by hand.

What we test:
    ✅ Missing ids raise NotFoundError before anything else happens
    ✅ Cache invalidation happens only after a successful commit
    ✅ Rejected updates neither commit nor invalidate
    ✅ Ownership is checked on the loaded user
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.exceptions import ForbiddenError, NotFoundError, ValidationFailedError
from app.models import Customer, Product, User
from app.models.mixins import ROLE_USER
from app.schemas.product import ProductUpdate, ProductWrite
from app.schemas.user import UserUpdate
from app.security.authorization import Principal, PrincipalKind
from app.services.product_service import ProductService
from app.services.user_service import UserService
from app.services.validation import merge_changes


def make_product(product_id: int = 1) -> Product:
    now = datetime.now(timezone.utc)
    product = Product(name="Phone X", description="Flagship", price=Decimal("999.99"))
    product.id = product_id
    product.created_at = now
    product.updated_at = now
    return product


def make_user(user_id: int, owner: Customer) -> User:
    now = datetime.now(timezone.utc)
    user = User(email="alice@example.com", firstname="Alice", lastname="Martin", stored_roles=[])
    user.id = user_id
    user.created_at = now
    user.updated_at = now
    user.customers = [owner]
    return user


def make_customer(customer_id: int) -> Customer:
    customer = Customer(name=f"Customer {customer_id}", email=f"c{customer_id}@example.com", password="x")
    customer.id = customer_id
    return customer


class TestMergeChanges:

    def test_only_sent_fields_override(self):
        merged = merge_changes(
            {"name": "Phone X", "price": 1, "description": "d"},
            ProductUpdate(price=2),
        )

        assert merged == {"name": "Phone X", "price": 2, "description": "d"}

    def test_explicit_null_is_kept_for_revalidation(self):
        merged = merge_changes({"name": "Phone X"}, ProductUpdate(name=None))

        assert merged == {"name": None}


class TestProductService:

    def setup_method(self):
        self.service = ProductService()
        self.cache = MagicMock()

    @pytest.mark.asyncio
    async def test_get_missing_product_raises(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.get_product(mock_db_session, 42)

    @pytest.mark.asyncio
    async def test_create_commits_before_invalidating(self, mock_db_session):
        order = []
        mock_db_session.commit.side_effect = lambda: order.append("commit")
        self.cache.invalidate.side_effect = lambda kind: order.append(f"invalidate:{kind}")

        async def assign_id():
            mock_db_session.add.call_args.args[0].id = 7
            created = mock_db_session.add.call_args.args[0]
            created.created_at = created.updated_at = datetime.now(timezone.utc)

        mock_db_session.flush.side_effect = assign_id

        result = await self.service.create_product(
            mock_db_session, self.cache, ProductWrite(name="Phone Pro", price=10)
        )

        assert result.id == 7
        assert order == ["commit", "invalidate:products"]

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_cache(self, mock_db_session):
        mock_db_session.get.return_value = make_product()
        mock_db_session.commit.side_effect = RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            await self.service.delete_product(mock_db_session, self.cache, 1)

        self.cache.invalidate.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejected_update_does_not_touch_row(self, mock_db_session):
        product = make_product()
        mock_db_session.get.return_value = product

        with pytest.raises(ValidationFailedError) as exc_info:
            await self.service.update_product(
                mock_db_session, self.cache, 1, ProductUpdate(price=-5)
            )

        assert exc_info.value.violations[0]["field"] == "price"
        assert product.price == Decimal("999.99")
        mock_db_session.commit.assert_not_awaited()
        self.cache.invalidate.assert_not_called()


class TestUserService:

    def setup_method(self):
        self.service = UserService()
        self.cache = MagicMock()
        self.owner = make_customer(1)
        self.stranger = Principal(PrincipalKind.CUSTOMER, 2, "c2@example.com", (ROLE_USER,))

    @pytest.mark.asyncio
    async def test_missing_user_is_not_found_even_for_stranger(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.get_user(mock_db_session, self.stranger, 99)

    @pytest.mark.asyncio
    async def test_stranger_update_is_forbidden_and_not_applied(self, mock_db_session):
        user = make_user(5, self.owner)
        mock_db_session.get.return_value = user

        with pytest.raises(ForbiddenError):
            await self.service.update_user(
                mock_db_session, self.cache, self.stranger, 5, UserUpdate(lastname="X")
            )

        assert user.lastname == "Martin"
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owner_delete_invalidates_users(self, mock_db_session):
        user = make_user(5, self.owner)
        mock_db_session.get.return_value = user
        principal = Principal(PrincipalKind.CUSTOMER, 1, "c1@example.com", (ROLE_USER,))

        await self.service.delete_user(mock_db_session, self.cache, principal, 5)

        mock_db_session.delete.assert_awaited_once_with(user)
        mock_db_session.commit.assert_awaited_once()
        self.cache.invalidate.assert_called_once_with("users")
