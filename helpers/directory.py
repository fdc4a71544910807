"""Read paths for tutors and appointments.

Reads go through one reconnect-and-retry and then degrade to the static
snapshots. Writes never use the snapshots.
"""
import logging
from typing import List

from tortoise.exceptions import OperationalError

from helpers.errors import PersistentStoreFailure
from helpers.snapshot import load_snapshot
from helpers.store import BookingStore

logger = logging.getLogger(__name__)


async def seed_tutors(store: BookingStore) -> int:
    snapshot = load_snapshot("tutors")
    created = 0
    for tutor in snapshot["tutors"]:
        await store.create_tutor(
            id=tutor["id"],
            name=tutor["name"],
            email=tutor["email"],
            subjects=tutor.get("subjects") or {},
            availability=tutor.get("availability") or {},
        )
        created += 1
    return created


async def _list_tutors_seeding(store: BookingStore) -> List[dict]:
    tutors = await store.list_tutors()
    if tutors:
        return [tutor.to_dict() for tutor in tutors]

    logger.info("No tutors found in database, seeding from snapshot...")
    try:
        created = await seed_tutors(store)
        logger.info(f"Seeded {created} tutors")
    except Exception as e:
        logger.error(f"Error seeding tutors: {e}")
    return [tutor.to_dict() for tutor in await store.list_tutors()]


def _fallback(name: str, error: Exception) -> List[dict]:
    try:
        records = load_snapshot(name)[name]
    except (OSError, ValueError) as e:
        logger.error(f"Error loading {name} snapshot: {e}")
        raise PersistentStoreFailure(f"Failed to fetch {name} and snapshot data unavailable") from error
    logger.warning(f"Using {name} snapshot: {error}")
    return records


async def read_tutors(store: BookingStore) -> List[dict]:
    """All tutors, most recent first; an empty directory is seeded on this call."""
    try:
        return await store.retrying(lambda: _list_tutors_seeding(store))
    except (PersistentStoreFailure, OperationalError) as e:
        return _fallback("tutors", e)


async def read_appointments(store: BookingStore) -> List[dict]:
    async def _list() -> List[dict]:
        return [appointment.to_dict() for appointment in await store.list_appointments()]

    try:
        return await store.retrying(_list)
    except (PersistentStoreFailure, OperationalError) as e:
        return _fallback("appointments", e)
