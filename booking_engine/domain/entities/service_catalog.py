from __future__ import annotations

from dataclasses import dataclass

from booking_engine.domain.entities.booking import ServiceType


@dataclass(frozen=True)
class ServiceEntry:
    id: str
    name: str
    service_type: ServiceType
    price: float
    duration_minutes: int
    shop_id: str | None = None
    active: bool = True
