"""
Role-based permissions and the caller identity passed into services.

Every role maps to an explicit set of actions. The mapping is checked against
the role enum at import time, so adding a role without deciding its
permissions fails loudly instead of falling through to a default.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet
import enum
import uuid

from marketplace.models.user import User, UserRole


class Action(str, enum.Enum):
    """Privileged operations guarded by role."""
    CREATE_PROPERTY = "create_property"
    EDIT_OWN_PROPERTY = "edit_own_property"
    PUBLISH_OWN_PROPERTY = "publish_own_property"
    DELETE_OWN_PROPERTY = "delete_own_property"
    DELETE_ANY_PROPERTY = "delete_any_property"
    VIEW_OWN_LISTINGS = "view_own_listings"
    VIEW_UNPUBLISHED_PROPERTY = "view_unpublished_property"
    MODERATE_PROPERTY = "moderate_property"
    VIEW_USERS = "view_users"
    VIEW_METRICS = "view_metrics"
    MANAGE_FAVORITES = "manage_favorites"


ROLE_ACTIONS: Dict[UserRole, FrozenSet[Action]] = {
    UserRole.USER: frozenset({
        Action.MANAGE_FAVORITES,
    }),
    UserRole.OWNER: frozenset({
        Action.CREATE_PROPERTY,
        Action.EDIT_OWN_PROPERTY,
        Action.PUBLISH_OWN_PROPERTY,
        Action.DELETE_OWN_PROPERTY,
        Action.VIEW_OWN_LISTINGS,
        Action.MANAGE_FAVORITES,
    }),
    UserRole.ADMIN: frozenset({
        Action.DELETE_ANY_PROPERTY,
        Action.VIEW_UNPUBLISHED_PROPERTY,
        Action.MODERATE_PROPERTY,
        Action.VIEW_USERS,
        Action.VIEW_METRICS,
        Action.MANAGE_FAVORITES,
    }),
}

_unmapped = set(UserRole) - set(ROLE_ACTIONS)
if _unmapped:
    raise RuntimeError(f"Roles without a permission set: {sorted(r.value for r in _unmapped)}")


def role_allows(role: UserRole, action: Action) -> bool:
    """
    Check whether a role may perform an action.

    Raises:
        ValueError: If the role is not a known UserRole
    """
    try:
        return action in ROLE_ACTIONS[UserRole(role)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown role: {role!r}")


@dataclass(frozen=True)
class Caller:
    """Authenticated identity threaded explicitly through service calls."""

    user_id: uuid.UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(user_id=user.id, role=user.role)

    def can(self, action: Action) -> bool:
        return role_allows(self.role, action)

    def owns(self, owner_id: uuid.UUID) -> bool:
        return self.user_id == owner_id
