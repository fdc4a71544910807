"""Error kinds raised by the booking flow.

Each carries the HTTP status and the human-readable reason the controllers
hand back to the wizard.
"""
from typing import Optional


class BookingError(Exception):
    status_code = 500
    default_detail = "Unexpected booking error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationFailure(BookingError):
    status_code = 400
    default_detail = "Invalid booking request"


class BotGateFailure(BookingError):
    status_code = 400
    default_detail = "Captcha verification failed"


class UnknownTutor(BookingError):
    status_code = 400
    default_detail = "Selected tutor is not available"


class SlotConflict(BookingError):
    status_code = 409
    default_detail = "This time slot is no longer available"


class TransientStoreFailure(BookingError):
    status_code = 503
    default_detail = "Database temporarily unavailable"


class PersistentStoreFailure(BookingError):
    status_code = 500
    default_detail = "Database unavailable"
