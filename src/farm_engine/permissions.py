"""Role based permissions.

The permission table maps resource -> action -> roles allowed. It is built
once at import and cannot be mutated afterwards.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Role(str, Enum):
    """User roles."""

    OWNER = "owner"
    STAFF = "staff"


_OWNER = frozenset({Role.OWNER})
_ALL = frozenset({Role.OWNER, Role.STAFF})


def _freeze(
    table: dict[str, dict[str, frozenset[Role]]],
) -> Mapping[str, Mapping[str, frozenset[Role]]]:
    return MappingProxyType(
        {resource: MappingProxyType(dict(actions)) for resource, actions in table.items()}
    )


PERMISSIONS: Mapping[str, Mapping[str, frozenset[Role]]] = _freeze(
    {
        "laborers": {"read": _ALL, "create": _ALL, "update": _ALL, "delete": _OWNER},
        "work_assignments": {"read": _ALL, "create": _ALL, "update": _ALL, "delete": _OWNER},
        "payroll": {"read": _ALL, "create": _OWNER, "update": _OWNER, "delete": _OWNER},
        "feed": {"read": _ALL, "create": _OWNER, "update": _OWNER, "delete": _OWNER},
        "houses": {"read": _ALL, "create": _OWNER, "update": _OWNER, "delete": _OWNER},
        "daily_logs": {"read": _ALL, "create": _ALL, "update": _ALL, "delete": _OWNER},
        "costs": {"read": _ALL, "write": _OWNER},
    }
)


def parse_role(value: str | None) -> Role | None:
    """Map a raw role string to a Role, or None when unknown."""
    if not value:
        return None
    try:
        return Role(value.strip().lower())
    except ValueError:
        return None


def has_permission(role: Role | str | None, resource: str, action: str) -> bool:
    """Check whether a role may perform an action on a resource.

    Unknown roles, resources and actions are denied.
    """
    if not isinstance(role, Role):
        role = parse_role(role)
    if role is None:
        return False
    allowed = PERMISSIONS.get(resource, {}).get(action)
    return allowed is not None and role in allowed
