import json
import os

os.environ.setdefault("DATABASE_URI", "sqlite://:memory:")

import httpx
import pytest
from tortoise import Tortoise

from helpers.captcha import get_captcha_verifier
from models.tutor import Tutor

SNAPSHOT_TUTORS = [
    {
        "id": "snap-1",
        "name": "Sarah Chen",
        "email": "sarah@example.com",
        "subjects": {"Mathematics": {"Algebra 1": ["CP", "Honors"]}},
        "availability": {"monday": ["15:00", "15:30"]},
    },
    {
        "id": "snap-2",
        "name": "Marcus Johnson",
        "email": "marcus@example.com",
        "subjects": {"Science": {"Physics": ["Honors"]}},
        "availability": {"tuesday": ["16:00"]},
    },
]

SNAPSHOT_APPOINTMENTS = [
    {
        "id": "appt-snap",
        "studentName": "Snapshot Student",
        "tutorId": "snap-1",
        "day": "monday",
        "time": "15:00",
    },
]


@pytest.fixture(autouse=True)
def snapshot_dir(tmp_path, monkeypatch):
    # keep snapshot reads away from the repo's public/ folder
    (tmp_path / "tutors.json").write_text(json.dumps({"tutors": SNAPSHOT_TUTORS}))
    (tmp_path / "appointments.json").write_text(json.dumps({"appointments": SNAPSHOT_APPOINTMENTS}))
    monkeypatch.setenv("SNAPSHOT_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
async def db():
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["models.tutor", "models.appointment"]},
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
async def tutor_a(db):
    return await Tutor.create(
        id="tutor-a",
        name="Alice Tutor",
        email="alice@example.com",
        subjects={"Mathematics": {"Algebra 1": ["Honors", "CP"]}},
        availability={"monday": ["15:00", "15:30"], "tuesday": ["15:00"]},
    )


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_send(to_address, subject, message_html):
        sent.append({"to": to_address, "subject": subject, "html": message_html})
        return True

    monkeypatch.setattr("helpers.email.send_email", fake_send)
    return sent


async def accept_all(token):
    return True


@pytest.fixture
async def client(db, sent_emails):
    from main import app

    app.dependency_overrides[get_captcha_verifier] = lambda: accept_all
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def booking_payload(**overrides):
    payload = {
        "studentName": "Sam Student",
        "email": "sam@example.com",
        "phone": "7815550123",
        "grade": "10th Grade",
        "subject": "Mathematics",
        "className": "Algebra 1",
        "level": "Honors",
        "tutorId": "tutor-a",
        "day": "monday",
        "time": "15:00",
        "notes": "Quadratics please",
        "captchaToken": "token-ok",
    }
    payload.update(overrides)
    return payload
