# app/services/marketplace/permissions.py
from dataclasses import dataclass
from enum import Enum

from app.core.errors import UnauthorizedError


class Role(str, Enum):
    CLIENT = "client"
    FREELANCER = "freelancer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """Identity on whose behalf an operation runs"""
    user_id: str
    role: Role


def require_role(actor: Actor, *roles: Role) -> Actor:
    """Capability check applied at the API boundary before calling a service"""
    if actor.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise UnauthorizedError(f"This action requires one of the roles: {allowed}")
    return actor
