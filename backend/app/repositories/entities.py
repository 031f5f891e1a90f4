"""Concrete repositories. Queries beyond the generic ones live here."""

from app.models import Admin, Customer, Product, User
from app.repositories.base import Repository


class CustomerRepository(Repository[Customer]):
    model = Customer
    resource = "customer"


class ProductRepository(Repository[Product]):
    model = Product
    resource = "product"


class UserRepository(Repository[User]):
    model = User
    resource = "user"


class AdminRepository(Repository[Admin]):
    model = Admin
    resource = "admin"
