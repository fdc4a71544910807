import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from helpers.booking import request_booking
from helpers.captcha import CaptchaVerifier, get_captcha_verifier
from helpers.directory import read_appointments
from helpers.email import notify_booking_confirmed
from helpers.errors import BookingError, PersistentStoreFailure
from helpers.schemas import BookingRequest
from helpers.store import BookingStore, get_store

logger = logging.getLogger(__name__)

appointment_router = APIRouter()


@appointment_router.get("/appointments")
async def list_appointments(store: BookingStore = Depends(get_store)):
    try:
        return {"appointments": await read_appointments(store)}
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@appointment_router.post("/appointments", status_code=201)
async def create_appointment(
    req: BookingRequest,
    background_tasks: BackgroundTasks,
    store: BookingStore = Depends(get_store),
    verify: CaptchaVerifier = Depends(get_captcha_verifier),
):
    try:
        appointment = await request_booking(store, req, verify)
    except PersistentStoreFailure:
        raise HTTPException(status_code=500, detail="Failed to create appointment")
    except BookingError as e:
        logger.info(f"Booking rejected: {e.detail}")
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        logger.exception(f"Error creating appointment: {e}")
        raise HTTPException(status_code=500, detail="Failed to create appointment")

    payload = appointment.to_dict()
    background_tasks.add_task(notify_booking_confirmed, payload)
    return {"appointment": payload}
