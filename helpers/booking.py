import logging

from tortoise.exceptions import IntegrityError

from helpers.captcha import CaptchaVerifier
from helpers.errors import BotGateFailure, SlotConflict, UnknownTutor, ValidationFailure
from helpers.schemas import BookingRequest
from helpers.slots import nominal_times, teaches
from helpers.store import BookingStore
from models.appointment import Appointment

logger = logging.getLogger(__name__)


async def request_booking(store: BookingStore, req: BookingRequest, verify: CaptchaVerifier) -> Appointment:
    """Validate and persist a booking.

    Checks run in order: captcha, tutor, offering, slot. The pre-insert slot
    check only gives a fast answer; the (tutor, day, time, status) unique
    constraint decides races, and its violation is reported as a conflict too.
    The captcha is verified once, outside the retried store work, since tokens
    are single use.
    """
    if not req.captcha_token:
        raise BotGateFailure("Captcha verification is required")
    if not await verify(req.captcha_token):
        raise BotGateFailure("Captcha verification failed")

    insert_attempted = False

    async def _book() -> Appointment:
        nonlocal insert_attempted
        tutor = await store.get_tutor(req.tutor_id)
        if not tutor:
            raise UnknownTutor()

        if not teaches(tutor.subjects, req.subject, req.class_name, req.level):
            raise ValidationFailure(f"{tutor.name} does not teach {req.subject} {req.class_name} ({req.level})")
        if req.time not in nominal_times(tutor.availability, req.day):
            raise ValidationFailure(f"{tutor.name} is not available on {req.day} at {req.time}")

        existing = await store.find_confirmed(req.tutor_id, req.day, req.time)
        if existing:
            # an insert that committed before the connection dropped is this booking
            if insert_attempted and existing.email == req.email and existing.student_name == req.student_name:
                existing.tutor = tutor
                return existing
            raise SlotConflict()

        insert_attempted = True
        try:
            return await store.create_appointment(
                student_name=req.student_name,
                email=req.email,
                phone=req.phone,
                grade=req.grade,
                subject=req.subject,
                class_name=req.class_name,
                level=req.level,
                tutor=tutor,
                day=req.day,
                time=req.time,
                notes=req.notes,
            )
        except IntegrityError as e:
            logger.info(f"Slot taken concurrently for tutor {req.tutor_id} on {req.day} at {req.time}: {e}")
            raise SlotConflict() from e

    appointment = await store.retrying(_book)
    logger.info(f"Appointment {appointment.id} booked with tutor {appointment.tutor_id} on {appointment.day} at {appointment.time}")
    return appointment
