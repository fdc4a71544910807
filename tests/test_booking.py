import pytest
from tortoise.exceptions import DBConnectionError

from conftest import booking_payload
from helpers.booking import request_booking
from helpers.errors import (
    BotGateFailure,
    PersistentStoreFailure,
    SlotConflict,
    TransientStoreFailure,
    UnknownTutor,
    ValidationFailure,
)
from helpers.schemas import BookingRequest
from helpers.store import BookingStore, transient_guard
from models.appointment import Appointment, AppointmentStatus


async def accept(token):
    return True


async def reject(token):
    return False


def make_request(**overrides) -> BookingRequest:
    return BookingRequest(**booking_payload(**overrides))


class FlakyStore(BookingStore):
    def __init__(self, failures: int):
        self.failures = failures
        self.reconnects = 0

    async def reconnect(self):
        self.reconnects += 1

    async def get_tutor(self, tutor_id):
        if self.failures:
            self.failures -= 1
            raise TransientStoreFailure("connection reset")
        return await super().get_tutor(tutor_id)


class DroppedAfterCommitStore(BookingStore):
    """The insert commits, then the connection drops before the reply arrives."""

    def __init__(self):
        self.dropped = False
        self.reconnects = 0

    async def reconnect(self):
        self.reconnects += 1

    async def create_appointment(self, **data):
        appointment = await super().create_appointment(**data)
        if not self.dropped:
            self.dropped = True
            raise TransientStoreFailure("connection reset after commit")
        return appointment


@pytest.mark.asyncio
async def test_booking_succeeds_and_is_confirmed(tutor_a):
    appointment = await request_booking(BookingStore(), make_request(), accept)

    assert appointment.status == AppointmentStatus.CONFIRMED
    assert appointment.tutor_id == "tutor-a"
    assert appointment.created_at is not None
    data = appointment.to_dict()
    assert data["studentName"] == "Sam Student"
    assert data["phone"] == "(781) 555-0123"
    assert data["tutor"]["name"] == "Alice Tutor"
    assert await Appointment.all().count() == 1


@pytest.mark.asyncio
async def test_second_booking_for_same_slot_conflicts(tutor_a):
    store = BookingStore()
    await request_booking(store, make_request(), accept)

    with pytest.raises(SlotConflict):
        await request_booking(store, make_request(studentName="Other Student"), accept)
    assert await Appointment.all().count() == 1


@pytest.mark.asyncio
async def test_different_time_or_day_is_accepted(tutor_a):
    store = BookingStore()
    await request_booking(store, make_request(), accept)
    await request_booking(store, make_request(time="15:30"), accept)
    await request_booking(store, make_request(day="tuesday"), accept)
    assert await Appointment.all().count() == 3


@pytest.mark.asyncio
async def test_unknown_tutor_rejected_before_slot_check(tutor_a):
    store = BookingStore()
    await request_booking(store, make_request(), accept)

    async def fail_if_called(*args):
        raise AssertionError("slot check must not run for an unknown tutor")

    store.find_confirmed = fail_if_called
    with pytest.raises(UnknownTutor):
        await request_booking(store, make_request(tutorId="ghost"), accept)


@pytest.mark.asyncio
async def test_rejected_captcha_stops_before_tutor_lookup(tutor_a):
    store = BookingStore()

    async def fail_if_called(*args):
        raise AssertionError("tutor lookup must not run when the captcha fails")

    store.get_tutor = fail_if_called
    with pytest.raises(BotGateFailure) as exc:
        await request_booking(store, make_request(), reject)
    assert exc.value.detail == "Captcha verification failed"
    assert await Appointment.all().count() == 0


@pytest.mark.asyncio
async def test_missing_captcha_token_skips_verifier(tutor_a):
    calls = []

    async def verifier(token):
        calls.append(token)
        return True

    with pytest.raises(BotGateFailure) as exc:
        await request_booking(BookingStore(), make_request(captchaToken=None), verifier)
    assert exc.value.detail == "Captcha verification is required"
    assert calls == []


@pytest.mark.asyncio
async def test_offering_mismatch_is_validation_failure(tutor_a):
    store = BookingStore()
    with pytest.raises(ValidationFailure):
        await request_booking(store, make_request(level="AP"), accept)
    with pytest.raises(ValidationFailure):
        await request_booking(store, make_request(time="17:00"), accept)
    with pytest.raises(ValidationFailure):
        await request_booking(store, make_request(day="friday"), accept)


@pytest.mark.asyncio
async def test_unique_constraint_reports_conflict_when_precheck_misses(tutor_a):
    store = BookingStore()
    await request_booking(store, make_request(), accept)

    async def stale_check(*args):
        return None

    # simulates a concurrent request that observed the slot as free
    store.find_confirmed = stale_check
    with pytest.raises(SlotConflict):
        await request_booking(store, make_request(studentName="Racer"), accept)
    assert await Appointment.all().count() == 1


@pytest.mark.asyncio
async def test_transient_failure_is_retried_once(tutor_a):
    store = FlakyStore(failures=1)
    appointment = await request_booking(store, make_request(), accept)
    assert appointment.id
    assert store.reconnects == 1


@pytest.mark.asyncio
async def test_insert_committed_before_connection_drop_is_not_a_conflict(tutor_a):
    store = DroppedAfterCommitStore()
    appointment = await request_booking(store, make_request(), accept)

    assert store.reconnects == 1
    assert appointment.student_name == "Sam Student"
    assert appointment.to_dict()["tutor"]["id"] == "tutor-a"
    assert await Appointment.all().count() == 1


@pytest.mark.asyncio
async def test_earlier_booking_by_same_student_is_still_a_conflict_after_retry(tutor_a):
    await Appointment.create(
        student_name="Sam Student",
        email="sam@example.com",
        grade="9th Grade",
        subject="Mathematics",
        class_name="Algebra 1",
        level="CP",
        tutor=tutor_a,
        day="monday",
        time="15:00",
    )
    with pytest.raises(SlotConflict):
        await request_booking(FlakyStore(failures=1), make_request(), accept)
    assert await Appointment.all().count() == 1


@pytest.mark.asyncio
async def test_second_transient_failure_is_persistent(tutor_a):
    store = FlakyStore(failures=2)
    with pytest.raises(PersistentStoreFailure):
        await request_booking(store, make_request(), accept)
    assert store.reconnects == 1
    assert await Appointment.all().count() == 0


@pytest.mark.asyncio
async def test_transient_guard_classifies_connection_errors():
    @transient_guard
    async def dropped():
        raise DBConnectionError("server closed the connection")

    @transient_guard
    async def bad_query():
        raise KeyError("not a connectivity problem")

    with pytest.raises(TransientStoreFailure):
        await dropped()
    with pytest.raises(KeyError):
        await bad_query()
