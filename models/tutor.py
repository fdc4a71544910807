from tortoise import fields
from tortoise.models import Model
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from models.appointment import Appointment


def generate_id() -> str:
    return uuid4().hex


class Tutor(Model):
    id = fields.CharField(max_length=64, primary_key=True, default=generate_id)
    name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255)
    subjects = fields.JSONField(default=dict)  # {"Mathematics": {"Algebra 1": ["Honors", "CP"]}}
    availability = fields.JSONField(default=dict)  # {"monday": ["15:00", "15:30"]}
    created_at = fields.DatetimeField(auto_now_add=True)

    appointments: fields.ReverseRelation["Appointment"]

    class Meta:
        table = "tutors"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subjects": self.subjects,
            "availability": self.availability,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
