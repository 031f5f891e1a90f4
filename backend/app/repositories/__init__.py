"""
BileMo API — Repositories
===========================

Thin query wrappers, one per entity, instantiated per request around the
request's AsyncSession. Services never build `select()` statements
themselves.
"""

from app.repositories.base import Repository
from app.repositories.entities import (
    AdminRepository,
    CustomerRepository,
    ProductRepository,
    UserRepository,
)

__all__ = [
    "Repository",
    "AdminRepository",
    "CustomerRepository",
    "ProductRepository",
    "UserRepository",
]
