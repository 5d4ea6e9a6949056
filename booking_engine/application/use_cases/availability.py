from __future__ import annotations

import logging
from datetime import date

from booking_engine.application.exceptions import NotFound
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.conflict_checker import ConflictChecker, scope_for
from booking_engine.application.use_cases.schedule_resolver import ScheduleResolver
from booking_engine.application.use_cases.slot_generator import DEFAULT_STEP_MINUTES, generate_slots
from booking_engine.domain.entities.time_slot import TimeSlot


class AvailabilityUseCase:
    def __init__(
        self,
        resolver: ScheduleResolver,
        checker: ConflictChecker,
        catalog: ServiceCatalogPort,
        step_minutes: int = DEFAULT_STEP_MINUTES,
    ) -> None:
        self._resolver = resolver
        self._checker = checker
        self._catalog = catalog
        self._step = step_minutes
        self._logger = logging.getLogger(__name__)

    def available_slots(self, provider_id: str, day: date, service_id: str | None = None) -> list[TimeSlot]:
        """
        Free slots for a provider on a day.

        With ``service_id`` the conflict span is the service duration; without
        it every slot is one step long (the public grid).
        """
        provider = self._resolver.load_provider(provider_id)
        duration = self._step
        if service_id:
            service = self._catalog.get_service(service_id)
            if service is None:
                raise NotFound(f"Service {service_id} not found")
            duration = service.duration_minutes

        window = self._resolver.resolve(provider, day)
        if window is None:
            return []

        is_free = self._checker.free_predicate(scope_for(provider), day)
        slots = generate_slots(window, duration, is_free, self._step)
        self._logger.info(
            "Available slots computed",
            extra={"provider_id": provider_id, "count": len(slots), "date": day.isoformat()},
        )
        return slots
