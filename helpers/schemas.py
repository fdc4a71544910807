import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from helpers.slots import TIME_PATTERN, WEEKDAYS


def format_phone_number(value: str) -> str:
    digits = re.sub(r"[^\d]", "", value)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]}"


def _check_day(value: str) -> str:
    day = value.strip().lower()
    if day not in WEEKDAYS:
        raise ValueError(f"day must be one of {', '.join(WEEKDAYS)}")
    return day


def _check_time(value: str) -> str:
    time = value.strip()
    if not TIME_PATTERN.match(time):
        raise ValueError("time must be a 24-hour HH:MM value")
    return time


class BookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    student_name: str = Field(..., alias="studentName", min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    grade: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    class_name: str = Field(..., alias="className", min_length=1)
    level: str = Field(..., min_length=1)
    tutor_id: str = Field(..., alias="tutorId", min_length=1)
    day: str
    time: str
    notes: Optional[str] = None
    captcha_token: Optional[str] = Field(None, alias="captchaToken")

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _check_day(value)

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _check_time(value)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        return format_phone_number(value)

    @field_validator("notes")
    @classmethod
    def blank_notes(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class TutorCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    subjects: Dict[str, Dict[str, List[str]]] = Field(default_factory=dict)
    availability: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("availability")
    @classmethod
    def validate_availability(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        return {_check_day(day): [_check_time(t) for t in times] for day, times in value.items()}


class CaptchaRequest(BaseModel):
    token: Optional[str] = None
