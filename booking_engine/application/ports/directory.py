from __future__ import annotations

from abc import ABC, abstractmethod

from booking_engine.domain.entities.provider import Provider, Shop


class DirectoryPort(ABC):
    @abstractmethod
    def get_provider(self, provider_id: str) -> Provider | None:
        """Get a provider of any variant by id."""
        raise NotImplementedError

    @abstractmethod
    def get_shop(self, shop_id: str) -> Shop | None:
        """Get a shop with its opening hours and owner."""
        raise NotImplementedError
