from __future__ import annotations

from typing import Any, Iterable

from booking_engine.application.dto.directory_records import ProviderRecord, ServiceRecord, ShopRecord
from booking_engine.application.ports.directory import DirectoryPort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.domain.entities.provider import Provider, Shop
from booking_engine.domain.entities.service_catalog import ServiceEntry


class StaticDirectory(DirectoryPort):
    def __init__(self, providers: Iterable[Provider] = (), shops: Iterable[Shop] = ()) -> None:
        self._providers = {p.id: p for p in providers}
        self._shops = {s.id: s for s in shops}

    @classmethod
    def from_records(cls, data: dict[str, Any]) -> "StaticDirectory":
        """Build from wire-shaped dicts: ``{"providers": [...], "shops": [...]}``."""
        return cls(
            providers=[ProviderRecord.model_validate(p).to_entity() for p in data.get("providers", [])],
            shops=[ShopRecord.model_validate(s).to_entity() for s in data.get("shops", [])],
        )

    def get_provider(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    def get_shop(self, shop_id: str) -> Shop | None:
        return self._shops.get(shop_id)


class StaticServiceCatalog(ServiceCatalogPort):
    def __init__(self, services: Iterable[ServiceEntry] = ()) -> None:
        self._services = {s.id: s for s in services}

    @classmethod
    def from_records(cls, data: dict[str, Any], default_duration: int = 30) -> "StaticServiceCatalog":
        return cls(
            services=[
                ServiceRecord.model_validate(s).to_entity(default_duration)
                for s in data.get("services", [])
            ]
        )

    def get_service(self, service_id: str) -> ServiceEntry | None:
        return self._services.get(service_id.strip())
