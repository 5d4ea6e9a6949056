from __future__ import annotations

from fastapi import Header, HTTPException

from booking_engine.domain.entities.actor import Actor, ActorRole


def get_actor(
    actor_id: str | None = Header(None, alias="X-Actor-Id"),
    actor_role: str | None = Header(None, alias="X-Actor-Role"),
    actor_scope: str | None = Header(None, alias="X-Actor-Scope"),
) -> Actor:
    """Identity is established upstream; the engine trusts these headers."""
    if not actor_id or not actor_role:
        raise HTTPException(status_code=401, detail="X-Actor-Id and X-Actor-Role headers are required")
    try:
        role = ActorRole(actor_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown actor role {actor_role!r}")
    if role == ActorRole.SYSTEM:
        raise HTTPException(status_code=401, detail="The system role cannot be claimed over HTTP")

    scope = frozenset(s.strip() for s in (actor_scope or "").split(",") if s.strip())
    return Actor(actor_id=actor_id.strip(), role=role, scope=scope)
