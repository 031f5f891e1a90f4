"""
BileMo API — Read Views and HATEOAS Links
===========================================

What:  Turns ORM entities into their read schemas, attaches `_links`, and
       renders list pages to the JSON text stored in the response cache.
Why:   A view decides which fields are visible (passwords never are) and
       which related entities are embedded. The embed graph below is also
       what drives cache invalidation: a page is stale whenever any entity
       it embeds changes.

Views:
    customer:read  customers (with user summaries) and users
    product:read   products

Links:
    Every entity gets `self`. Users also get `update` and `delete` when the
    viewer holds ROLE_USER, mirroring the actions the viewer may call.
"""

from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel

from app.models import Customer, Product, User
from app.models.mixins import ROLE_USER
from app.schemas.common import Link
from app.schemas.customer import CustomerRead
from app.schemas.product import ProductRead
from app.schemas.user import UserRead
from app.security.authorization import is_granted


# kind → kinds its read view embeds
EMBEDS: Dict[str, Sequence[str]] = {
    "customers": ("users",),
    "users": (),
    "products": (),
}


def detail_path(kind: str, entity_id: int) -> str:
    return f"/api/{kind}/{entity_id}"


def customer_view(customer: Customer) -> CustomerRead:
    view = CustomerRead.model_validate(customer)
    view.links = {"self": Link(href=detail_path("customers", customer.id))}
    return view


def product_view(product: Product) -> ProductRead:
    view = ProductRead.model_validate(product)
    view.links = {"self": Link(href=detail_path("products", product.id))}
    return view


def user_view(user: User, viewer_roles: Iterable[str]) -> UserRead:
    view = UserRead.model_validate(user)
    href = detail_path("users", user.id)
    links = {"self": Link(href=href)}
    if is_granted(viewer_roles, ROLE_USER):
        links["update"] = Link(href=href)
        links["delete"] = Link(href=href)
    view.links = links
    return view


def render_page(views: List[BaseModel]) -> str:
    """JSON array text of `views`, aliases applied (`_links`)."""
    return "[" + ",".join(view.model_dump_json(by_alias=True) for view in views) + "]"
