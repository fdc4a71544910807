from fastapi import APIRouter, Depends, HTTPException, Query

from helpers.directory import read_appointments, read_tutors
from helpers.errors import BookingError
from helpers.slots import (
    derive_available_classes,
    derive_available_levels,
    derive_available_times,
    derive_available_tutors,
    format_time,
    is_slot_free,
)
from helpers.store import BookingStore, get_store

availability_router = APIRouter(prefix="/availability")


async def _tutors(store: BookingStore):
    try:
        return await read_tutors(store)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@availability_router.get("/classes")
async def available_classes(subject: str, store: BookingStore = Depends(get_store)):
    return {"classes": derive_available_classes(await _tutors(store), subject)}


@availability_router.get("/levels")
async def available_levels(
    subject: str,
    class_name: str = Query(..., alias="className"),
    store: BookingStore = Depends(get_store),
):
    return {"levels": derive_available_levels(await _tutors(store), subject, class_name)}


@availability_router.get("/tutors")
async def available_tutors(
    subject: str,
    level: str,
    class_name: str = Query(..., alias="className"),
    store: BookingStore = Depends(get_store),
):
    return {"tutors": derive_available_tutors(await _tutors(store), subject, class_name, level)}


@availability_router.get("/times")
async def available_times(
    day: str,
    tutor_id: str = Query(..., alias="tutorId"),
    store: BookingStore = Depends(get_store),
):
    """Nominal times for the tutor's day, flagged by whether a confirmed booking holds them."""
    tutor = next((t for t in await _tutors(store) if t.get("id") == tutor_id), None)
    if not tutor:
        raise HTTPException(status_code=404, detail="Tutor not found")
    try:
        appointments = await read_appointments(store)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    day = day.lower()
    return {
        "times": [
            {
                "time": time,
                "label": format_time(time),
                "available": is_slot_free(appointments, tutor_id, day, time),
            }
            for time in derive_available_times(tutor, day)
        ]
    }
