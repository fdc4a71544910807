from tortoise import fields
from tortoise.models import Model
from enum import Enum

from models.tutor import generate_id


class AppointmentStatus(Enum):
    CONFIRMED = "confirmed"


class Appointment(Model):
    id = fields.CharField(max_length=64, primary_key=True, default=generate_id)
    student_name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255)
    phone = fields.CharField(max_length=32, null=True)
    grade = fields.CharField(max_length=50)
    subject = fields.CharField(max_length=100)
    class_name = fields.CharField(max_length=100)
    level = fields.CharField(max_length=50)
    tutor = fields.ForeignKeyField("models.Tutor", related_name="appointments")
    day = fields.CharField(max_length=10)  # monday..friday
    time = fields.CharField(max_length=5)  # "15:00" (24h format)
    status = fields.CharEnumField(enum_type=AppointmentStatus, max_length=20, default=AppointmentStatus.CONFIRMED)
    notes = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "appointments"
        # one confirmed booking per (tutor, day, time)
        unique_together = (("tutor", "day", "time", "status"),)

    def to_dict(self, include_tutor: bool = True) -> dict:
        data = {
            "id": self.id,
            "studentName": self.student_name,
            "email": self.email,
            "phone": self.phone,
            "grade": self.grade,
            "subject": self.subject,
            "className": self.class_name,
            "level": self.level,
            "tutorId": self.tutor_id,
            "day": self.day,
            "time": self.time,
            "status": self.status.value,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_tutor:
            data["tutor"] = self.tutor.to_dict()
        return data
