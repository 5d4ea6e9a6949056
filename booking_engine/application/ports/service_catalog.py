from __future__ import annotations

from abc import ABC, abstractmethod

from booking_engine.domain.entities.service_catalog import ServiceEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> ServiceEntry | None:
        """Get service catalog entry by id."""
        raise NotImplementedError
