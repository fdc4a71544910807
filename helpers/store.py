import logging
from functools import wraps
from typing import Awaitable, Callable, List, Optional, TypeVar

from tortoise import connections
from tortoise.exceptions import DBConnectionError

from helpers.errors import PersistentStoreFailure, TransientStoreFailure
from models.appointment import Appointment, AppointmentStatus
from models.tutor import Tutor

logger = logging.getLogger(__name__)

T = TypeVar("T")

# connectivity-class failures only; query and constraint errors propagate as-is
TRANSIENT_ERRORS = (DBConnectionError, OSError, TimeoutError)


def transient_guard(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except TRANSIENT_ERRORS as e:
            raise TransientStoreFailure(f"{func.__name__}: {e}") from e
    return wrapper


class BookingStore:
    """Handle on the tutor directory and appointment ledger."""

    @transient_guard
    async def list_tutors(self) -> List[Tutor]:
        return await Tutor.all().order_by("-created_at", "-id")

    @transient_guard
    async def get_tutor(self, tutor_id: str) -> Optional[Tutor]:
        return await Tutor.get_or_none(id=tutor_id)

    @transient_guard
    async def create_tutor(self, **data) -> Tutor:
        return await Tutor.create(**data)

    @transient_guard
    async def list_appointments(self) -> List[Appointment]:
        return await Appointment.all().order_by("-created_at", "-id").prefetch_related("tutor")

    @transient_guard
    async def find_confirmed(self, tutor_id: str, day: str, time: str) -> Optional[Appointment]:
        return await Appointment.filter(
            tutor_id=tutor_id,
            day=day,
            time=time,
            status=AppointmentStatus.CONFIRMED,
        ).first()

    @transient_guard
    async def create_appointment(self, **data) -> Appointment:
        return await Appointment.create(status=AppointmentStatus.CONFIRMED, **data)

    async def reconnect(self) -> None:
        # dropped connections are re-opened lazily on the next query
        await connections.close_all(discard=True)

    async def retrying(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation``, reconnecting and retrying once on a transient failure."""
        try:
            return await operation()
        except TransientStoreFailure as e:
            logger.warning(f"Transient store failure, reconnecting and retrying once: {e}")
            await self.reconnect()
        try:
            return await operation()
        except TransientStoreFailure as e:
            logger.error(f"Store still unavailable after reconnect: {e}")
            raise PersistentStoreFailure() from e


def get_store() -> BookingStore:
    return BookingStore()
