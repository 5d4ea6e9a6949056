from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ActorRole(str, Enum):
    CUSTOMER = "customer"
    BARBER = "barber"
    FREELANCER = "freelancer"
    SHOP_OWNER = "shop_owner"
    ADMIN = "admin"
    SYSTEM = "system"


@dataclass(frozen=True)
class Actor:
    actor_id: str
    role: ActorRole
    scope: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN


SYSTEM_ACTOR = Actor(actor_id="system", role=ActorRole.SYSTEM)
