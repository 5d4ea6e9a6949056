from datetime import datetime
from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booking_engine.core.config import settings
from booking_engine.application.ports.booking_repository import BookingRepositoryPort
from booking_engine.application.ports.directory import DirectoryPort
from booking_engine.application.ports.notifier import NotificationPort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.availability import AvailabilityUseCase
from booking_engine.application.use_cases.booking_state_machine import BookingStateMachine
from booking_engine.application.use_cases.conflict_checker import ConflictChecker
from booking_engine.application.use_cases.reassignment import ReassignmentCoordinator
from booking_engine.application.use_cases.schedule_resolver import ScheduleResolver
from booking_engine.infrastructure.directory.demo_data import DEMO_DIRECTORY, DEMO_SERVICES
from booking_engine.infrastructure.directory.http_directory import (
    DirectoryClient,
    HttpDirectory,
    HttpServiceCatalog,
)
from booking_engine.infrastructure.directory.static_directory import StaticDirectory, StaticServiceCatalog
from booking_engine.infrastructure.notifications.mock_notifier import LoggingNotifier
from booking_engine.infrastructure.notifications.webhook_notifier import WebhookNotifier
from booking_engine.infrastructure.store.json_store import JsonBookingRepository
from booking_engine.infrastructure.store.memory_store import MemoryBookingRepository


logger = logging.getLogger(__name__)


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def get_clock():
    tz = get_timezone()
    return lambda: datetime.now(tz)


@lru_cache
def get_booking_repository() -> BookingRepositoryPort:
    if settings.STORE_PROVIDER.lower() == "json":
        logger.info("Using JsonBookingRepository path=%s", settings.BOOKING_DATA_PATH)
        return JsonBookingRepository(settings.BOOKING_DATA_PATH)
    return MemoryBookingRepository()


@lru_cache
def get_directory_client() -> DirectoryClient:
    return DirectoryClient(
        base_url=settings.DIRECTORY_BASE_URL,
        api_key=settings.DIRECTORY_API_KEY,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
    )


@lru_cache
def get_directory() -> DirectoryPort:
    if not settings.DIRECTORY_BASE_URL:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using StaticDirectory (DIRECTORY_BASE_URL missing, ENV=dev/local)")
            return StaticDirectory.from_records(DEMO_DIRECTORY)
        raise ValueError("DIRECTORY_BASE_URL is required outside dev/local.")
    return HttpDirectory(client=get_directory_client())


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    if not settings.DIRECTORY_BASE_URL:
        return StaticServiceCatalog.from_records(DEMO_SERVICES, settings.DEFAULT_SERVICE_DURATION_MINUTES)
    return HttpServiceCatalog(
        client=get_directory_client(),
        default_duration=settings.DEFAULT_SERVICE_DURATION_MINUTES,
    )


@lru_cache
def get_notifier() -> NotificationPort:
    if settings.NOTIFY_WEBHOOK_URL:
        return WebhookNotifier(settings.NOTIFY_WEBHOOK_URL, timeout=settings.UPSTREAM_TIMEOUT_SECONDS)
    logger.info("Using LoggingNotifier (NOTIFY_WEBHOOK_URL missing)")
    return LoggingNotifier()


def get_schedule_resolver() -> ScheduleResolver:
    return ScheduleResolver(directory=get_directory())


def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        resolver=get_schedule_resolver(),
        checker=ConflictChecker(get_booking_repository()),
        catalog=get_service_catalog(),
        step_minutes=settings.SLOT_STEP_MINUTES,
    )


def get_state_machine() -> BookingStateMachine:
    return BookingStateMachine(
        repository=get_booking_repository(),
        directory=get_directory(),
        catalog=get_service_catalog(),
        notifier=get_notifier(),
        resolver=get_schedule_resolver(),
        timezone=get_timezone(),
        min_advance_minutes=settings.MIN_ADVANCE_MINUTES,
        rating_requires_completed=settings.RATING_REQUIRES_COMPLETED,
        clock=get_clock(),
    )


def get_reassignment_coordinator() -> ReassignmentCoordinator:
    return ReassignmentCoordinator(
        repository=get_booking_repository(),
        machine=get_state_machine(),
        resolver=get_schedule_resolver(),
        notifier=get_notifier(),
        timezone=get_timezone(),
        clock=get_clock(),
    )
