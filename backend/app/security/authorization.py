"""
BileMo API — Authorization Predicate
======================================

What:  Decides whether a principal may perform an action on a resource.
Why:   One table holds every role requirement, so the access rules of the
       whole API can be read (and tested) in one place instead of being
       scattered over route decorators.
How:   `authorize(principal, action, resource, target=None)` raises
       ForbiddenError when the principal's roles (expanded through the role
       hierarchy) do not include the required role, or when the rule needs
       ownership and the principal does not own `target`.

Policy:
    customers  every action              ROLE_ADMIN
    products   list, detail              ROLE_USER
               create, update, delete    ROLE_ADMIN
    users      list, create              ROLE_USER
               detail, update, delete    ROLE_USER + ownership

Ownership is evaluated only when a target is passed. Routes check the role
before loading anything; services call again with the loaded entity once
they know it exists, which keeps "404 before 403" for missing ids.
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from app.exceptions import ForbiddenError
from app.models.mixins import ROLE_ADMIN, ROLE_USER


class Action(str, enum.Enum):
    LIST = "list"
    DETAIL = "detail"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class PrincipalKind(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, resolved from a bearer token."""
    kind: PrincipalKind
    id: int
    email: str
    roles: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_customer(self) -> bool:
        return self.kind is PrincipalKind.CUSTOMER


# Granting a key role implicitly grants every role in its set
ROLE_HIERARCHY: Dict[str, Set[str]] = {
    ROLE_ADMIN: {ROLE_USER},
}


@dataclass(frozen=True)
class Rule:
    role: str
    owner_only: bool = False


POLICY: Dict[Tuple[str, Action], Rule] = {
    **{("customers", action): Rule(ROLE_ADMIN) for action in Action},
    ("products", Action.LIST): Rule(ROLE_USER),
    ("products", Action.DETAIL): Rule(ROLE_USER),
    ("products", Action.CREATE): Rule(ROLE_ADMIN),
    ("products", Action.UPDATE): Rule(ROLE_ADMIN),
    ("products", Action.DELETE): Rule(ROLE_ADMIN),
    ("users", Action.LIST): Rule(ROLE_USER),
    ("users", Action.CREATE): Rule(ROLE_USER),
    ("users", Action.DETAIL): Rule(ROLE_USER, owner_only=True),
    ("users", Action.UPDATE): Rule(ROLE_USER, owner_only=True),
    ("users", Action.DELETE): Rule(ROLE_USER, owner_only=True),
}


def reachable_roles(roles: Iterable[str]) -> Set[str]:
    """Expands `roles` through ROLE_HIERARCHY."""
    result: Set[str] = set()
    pending: List[str] = list(roles)
    while pending:
        role = pending.pop()
        if role in result:
            continue
        result.add(role)
        pending.extend(ROLE_HIERARCHY.get(role, ()))
    return result


def is_granted(roles: Iterable[str], role: str) -> bool:
    return role in reachable_roles(roles)


def owns(principal: Principal, target: object) -> bool:
    """
    A customer owns a user it is linked to. Admins own nothing: user
    resources are managed by their customers only.
    """
    if not principal.is_customer:
        return False
    is_owned_by = getattr(target, "is_owned_by", None)
    return bool(is_owned_by and is_owned_by(principal.id))


def authorize(
    principal: Principal,
    action: Action,
    resource: str,
    target: Optional[object] = None,
) -> None:
    """
    Raises ForbiddenError unless `principal` may perform `action` on `resource`.

    Unknown (resource, action) pairs are denied.
    """
    rule = POLICY.get((resource, action))
    if rule is None:
        raise ForbiddenError(
            message=f"No access rule for {action.value} on {resource}",
            context={"resource": resource, "action": action.value},
        )

    if not is_granted(principal.roles, rule.role):
        raise ForbiddenError(
            message=f"You do not have sufficient rights to {action.value} {resource}",
            context={"required_role": rule.role, "principal": principal.email},
        )

    if target is not None and rule.owner_only and not owns(principal, target):
        singular = resource[:-1] if resource.endswith("s") else resource
        raise ForbiddenError(
            message=f"Not authorized to {action.value} this {singular}.",
            context={"principal": principal.email},
        )
