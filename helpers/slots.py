"""Slot resolution over the tutor directory and appointment ledger.

Tutors and appointments are handled in their wire shape (the dicts returned by
``Tutor.to_dict`` / ``Appointment.to_dict`` or read from the static snapshots),
which is also what the booking wizard works with.
"""
import re
from typing import Iterable, List, Mapping, Optional

from models.appointment import AppointmentStatus

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

CONFIRMED = AppointmentStatus.CONFIRMED.value


def teaches(subjects: Optional[Mapping], subject: str, class_name: str, level: str) -> bool:
    classes = (subjects or {}).get(subject) or {}
    return level in (classes.get(class_name) or [])


def nominal_times(availability: Optional[Mapping], day: str) -> List[str]:
    return list((availability or {}).get(day) or [])


def derive_available_classes(tutors: Iterable[Mapping], subject: str) -> List[str]:
    """Union of class names offered for ``subject``, in first-seen order."""
    classes: List[str] = []
    for tutor in tutors:
        for class_name in ((tutor.get("subjects") or {}).get(subject) or {}):
            if class_name not in classes:
                classes.append(class_name)
    return classes


def derive_available_levels(tutors: Iterable[Mapping], subject: str, class_name: str) -> List[str]:
    levels: List[str] = []
    for tutor in tutors:
        classes = (tutor.get("subjects") or {}).get(subject) or {}
        for level in classes.get(class_name) or []:
            if level not in levels:
                levels.append(level)
    return levels


def derive_available_tutors(tutors: Iterable[Mapping], subject: str, class_name: str, level: str) -> List[Mapping]:
    return [tutor for tutor in tutors if teaches(tutor.get("subjects"), subject, class_name, level)]


def derive_available_times(tutor: Mapping, day: str) -> List[str]:
    """The tutor's nominal times for ``day``; existing bookings are not applied."""
    return nominal_times(tutor.get("availability"), day)


def is_slot_free(appointments: Iterable[Mapping], tutor_id: str, day: str, time: str) -> bool:
    # snapshot records written before statuses existed count as confirmed
    for appointment in appointments:
        if (
            appointment.get("tutorId") == tutor_id
            and appointment.get("day") == day
            and appointment.get("time") == time
            and appointment.get("status", CONFIRMED) == CONFIRMED
        ):
            return False
    return True


def format_time(military_time: str) -> str:
    """'15:00' -> '3:00 PM', '00:30' -> '12:30 AM'."""
    hours, minutes = (int(part) for part in military_time.split(":"))
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def format_day(day: str) -> str:
    return day[:1].upper() + day[1:]
