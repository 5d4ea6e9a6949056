from __future__ import annotations

import logging
from datetime import date

from booking_engine.application.exceptions import NotFound, ValidationError
from booking_engine.application.ports.directory import DirectoryPort
from booking_engine.domain.entities.provider import Provider, Shop
from booking_engine.domain.entities.schedule import Weekday, Window


class ScheduleResolver:
    """Turns a provider's schedule into the bookable window for one calendar day.

    Personal schedules (barbers, freelancers) and shop opening hours (shop
    owners) both come out as a ``Window``; ``None`` means the provider is
    closed that day. Malformed clock strings are data errors and raise
    ``ValidationError`` instead of closing the day.
    """

    def __init__(self, directory: DirectoryPort) -> None:
        self._directory = directory
        self._logger = logging.getLogger(__name__)

    def resolve(self, provider: Provider, day: date) -> Window | None:
        try:
            window = provider.schedule_for_date(day, self._shop)
        except ValueError as e:
            self._logger.warning(
                "Malformed schedule",
                extra={"provider_id": provider.id, "reason": str(e)},
            )
            raise ValidationError(f"Provider {provider.id} has a malformed schedule: {e}") from e

        if window is None:
            self._logger.debug(
                "Provider closed",
                extra={"provider_id": provider.id, "reason": Weekday.from_date(day).value},
            )
        return window

    def resolve_for(self, provider_id: str, day: date) -> Window | None:
        return self.resolve(self.load_provider(provider_id), day)

    def load_provider(self, provider_id: str) -> Provider:
        provider = self._directory.get_provider(provider_id)
        if provider is None:
            raise NotFound(f"Provider {provider_id} not found")
        return provider

    def _shop(self, shop_id: str) -> Shop:
        shop = self._directory.get_shop(shop_id)
        if shop is None:
            raise NotFound(f"Shop {shop_id} not found")
        return shop
