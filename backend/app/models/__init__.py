"""
BileMo API — ORM Models
=========================

Importing this package registers every table on `Base.metadata`, which is
what Alembic autogenerate and the test suite's `create_all` rely on.
"""

from app.models.associations import customer_user
from app.models.admin import Admin
from app.models.customer import Customer
from app.models.product import Product
from app.models.user import User

__all__ = ["Admin", "Customer", "Product", "User", "customer_user"]
