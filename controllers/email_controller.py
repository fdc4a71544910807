import logging
import os

from fastapi import APIRouter, HTTPException

from helpers.email import sample_appointment, send_tutor_reminder_email

logger = logging.getLogger(__name__)

email_router = APIRouter()


@email_router.post("/test-email")
def send_test_email():
    to_email = os.getenv("TEST_EMAIL_TO")
    if not to_email:
        raise HTTPException(status_code=400, detail="TEST_EMAIL_TO is not set")
    try:
        sent = send_tutor_reminder_email(sample_appointment(to_email))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not sent:
        raise HTTPException(status_code=400, detail="Failed to send test email")
    logger.info(f"Test email sent to {to_email}")
    return {"success": True}
