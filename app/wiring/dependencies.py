import logging
from zoneinfo import ZoneInfo

from app.application.ports.booking_store import BookingStorePort
from app.application.ports.notifier import NotifierPort
from app.application.use_cases.cancel_booking_request import CancelBookingRequestUseCase
from app.application.use_cases.completed_report import CompletedBookingsReportUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.get_booking_status import GetBookingStatusUseCase
from app.application.use_cases.list_bookings import ListBookingsUseCase
from app.application.use_cases.update_side_status import UpdateSideStatusUseCase
from app.core.config import settings
from app.infrastructure.notify.logging_notifier import LoggingNotifier
from app.infrastructure.store.json_booking_store import JsonBookingStore
from app.infrastructure.store.memory_booking_store import MemoryBookingStore
from app.infrastructure.supabase.supabase_booking_store import SupabaseBookingStore


_booking_store: BookingStorePort | None = None
_notifier: NotifierPort | None = None


def _store_provider() -> str:
    if settings.STORE_PROVIDER:
        return settings.STORE_PROVIDER.lower()
    if settings.ENV.lower() in {"dev", "local"}:
        return "json"
    if settings.SUPABASE_URL:
        return "supabase"
    return "memory"


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is None:
        provider = _store_provider()
        logger = logging.getLogger(__name__)
        logger.info("Using booking store provider=%s ENV=%s", provider, settings.ENV)
        if provider == "supabase":
            _booking_store = SupabaseBookingStore()
        elif provider == "json":
            _booking_store = JsonBookingStore(data_dir=settings.BOOKING_DATA_DIR)
        elif provider == "memory":
            _booking_store = MemoryBookingStore()
        else:
            raise ValueError(f"Unknown STORE_PROVIDER: {provider}")
    return _booking_store


def get_notifier() -> NotifierPort:
    global _notifier
    if _notifier is None:
        _notifier = LoggingNotifier()
    return _notifier


def get_create_booking_use_case() -> CreateBookingUseCase:
    return CreateBookingUseCase(store=get_booking_store())


def get_booking_status_use_case() -> GetBookingStatusUseCase:
    return GetBookingStatusUseCase(store=get_booking_store())


def get_update_side_status_use_case() -> UpdateSideStatusUseCase:
    return UpdateSideStatusUseCase(store=get_booking_store(), notifier=get_notifier())


def get_cancel_booking_request_use_case() -> CancelBookingRequestUseCase:
    return CancelBookingRequestUseCase(store=get_booking_store(), notifier=get_notifier())


def get_list_bookings_use_case() -> ListBookingsUseCase:
    return ListBookingsUseCase(store=get_booking_store())


def get_completed_report_use_case() -> CompletedBookingsReportUseCase:
    return CompletedBookingsReportUseCase(
        store=get_booking_store(),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
    )
