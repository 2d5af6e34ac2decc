"""
Role-based authorization: the roles, the action -> allowed-roles table, and the gate.

Every protected endpoint names an action from POLICIES; authorize() is the only place
a resolved user's role is compared against what an action requires.
"""

from enum import Enum
from typing import NamedTuple

from store_ratings.core.errors import AuthorizationError


class Role(str, Enum):
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    NORMAL_USER = "NORMAL_USER"
    STORE_OWNER = "STORE_OWNER"


class Policy(NamedTuple):
    """Roles allowed to perform an action, and the message returned to everyone else."""

    roles: frozenset[Role]
    message: str


_ADMIN = frozenset({Role.SYSTEM_ADMIN})
_OWNER = frozenset({Role.STORE_OWNER})
_NORMAL = frozenset({Role.NORMAL_USER})

POLICIES: dict[str, Policy] = {
    # Admin namespace
    "admin.dashboard": Policy(_ADMIN, "Only system administrators can access dashboard"),
    "admin.list_users": Policy(_ADMIN, "Only system administrators can view users"),
    "admin.create_user": Policy(_ADMIN, "Only system administrators can create users"),
    "admin.update_user_role": Policy(_ADMIN, "Only system administrators can update user roles"),
    "admin.delete_user": Policy(_ADMIN, "Only system administrators can delete users"),
    # Stores
    "stores.create": Policy(_ADMIN, "Only system administrators can create stores"),
    "stores.update": Policy(_ADMIN, "Only system administrators can update stores"),
    "stores.delete": Policy(_ADMIN, "Only system administrators can delete stores"),
    "stores.owner_dashboard": Policy(_OWNER, "Only store owners can access dashboard"),
    # Store owner namespace
    "storeowner.profile": Policy(_OWNER, "Only store owners can access this endpoint"),
    "storeowner.update_profile": Policy(_OWNER, "Only store owners can update their profile"),
    "storeowner.create_store": Policy(_OWNER, "Only store owners can create their own store"),
    "storeowner.update_store": Policy(_OWNER, "Only store owners can update their store"),
    # Ratings
    "ratings.submit": Policy(_NORMAL, "Only normal users can submit ratings"),
    "ratings.update": Policy(_NORMAL, "Only normal users can update ratings"),
    "ratings.mine": Policy(_NORMAL, "Only normal users can view their ratings"),
    "ratings.my_store_rating": Policy(_NORMAL, "Only normal users can check their store ratings"),
    "ratings.store": Policy(_OWNER, "Only store owners can view store ratings"),
}


def authorize(role: str | Role, action: str) -> None:
    """Raise AuthorizationError unless role may perform action. Unknown actions are a programming error."""
    policy = POLICIES[action]
    try:
        resolved = Role(role)
    except ValueError:
        raise AuthorizationError(policy.message) from None
    if resolved not in policy.roles:
        raise AuthorizationError(policy.message)
