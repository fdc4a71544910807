from datetime import datetime, timezone
from html import escape
from typing import Optional
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import os
import dotenv

from helpers.slots import format_day, format_time


dotenv.load_dotenv()

logger = logging.getLogger(__name__)

CLUB_NAME = "Melrose Tutor Club"


def send_email(to_address: str, subject: str, message_html: str):
    user = os.getenv("SMTP_FROM_USER")
    smtp_server = os.getenv("SMTP_SERVER")
    smtp_port_str = os.getenv("SMTP_PORT")
    from_address = os.getenv("SMTP_FROM_ADDRESS")
    password = os.getenv('SMTP_PASSWORD')

    if not all([user, smtp_server, smtp_port_str, from_address, password]):
        raise ValueError("SMTP configuration is not set properly in environment variables.")

    assert user is not None
    assert smtp_server is not None
    assert smtp_port_str is not None
    assert from_address is not None
    assert password is not None
    smtp_port = int(smtp_port_str)
    message = MIMEMultipart()
    message["From"] = f'"{user}" <{from_address}>'
    message["To"] = to_address
    message["Subject"] = subject
    message.attach(MIMEText(message_html, "html"))

    try:
        with smtplib.SMTP_SSL(smtp_server, smtp_port) as server:
            server.login(from_address, password)
            server.send_message(message)
            logger.info(f"Email '{subject}' sent to {to_address}")
            return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_address}: {e}")
        return False


def _booked_on(created_at: Optional[str]) -> str:
    if not created_at:
        return ""
    booked = datetime.fromisoformat(created_at)
    # timestamps are stored in UTC; naive values come from stores without tz support
    if booked.tzinfo is None:
        booked = booked.replace(tzinfo=timezone.utc)
    booked = booked.astimezone(timezone.utc)
    return f"This session was booked on {booked.strftime('%m/%d/%Y')} at {booked.strftime('%I:%M %p').lstrip('0')} UTC"


def _session_details(appointment: dict) -> str:
    return f"""
            <div class="card accent">
                <h2>Session Details</h2>
                <table class="details">
                    <tr>
                        <td><strong>Subject:</strong><br>{escape(appointment["subject"])} - {escape(appointment["className"])}</td>
                        <td><strong>Level:</strong><br>{escape(appointment["level"])}</td>
                    </tr>
                    <tr>
                        <td><strong>Day:</strong><br>{format_day(appointment["day"])}</td>
                        <td><strong>Time:</strong><br>{format_time(appointment["time"])}</td>
                    </tr>
                </table>
            </div>"""


def _notes_block(appointment: dict) -> str:
    if not appointment.get("notes"):
        return ""
    return f"""
            <div class="card notes">
                <h4>Additional Notes</h4>
                <p>{escape(appointment["notes"])}</p>
            </div>"""


def _wrap(title: str, tagline: str, body: str, status_title: str, booked_on: str, footer_hint: str, kind: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>{title}</title>
        <style>
            body {{
                margin: 0;
                padding: 0;
                background-color: #f4f4f4;
                font-family: Arial, sans-serif;
            }}
            .email-container {{
                max-width: 600px;
                margin: 0 auto;
                background-color: #ffffff;
                border-radius: 8px;
                overflow: hidden;
            }}
            .header {{
                background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
                color: #ffffff;
                padding: 30px;
                text-align: center;
            }}
            .header h1 {{
                margin: 0;
                font-size: 24px;
            }}
            .body {{
                background-color: #f8f9fa;
                padding: 25px;
                color: #333333;
            }}
            .card {{
                background-color: #ffffff;
                padding: 20px;
                border-radius: 8px;
                margin-top: 15px;
            }}
            .card h2, .card h3 {{
                margin-top: 0;
                font-size: 18px;
            }}
            .accent {{
                border-left: 4px solid #667eea;
            }}
            .details td {{
                padding: 8px 15px 8px 0;
                vertical-align: top;
            }}
            .notes {{
                background-color: #fff3e0;
                border-left: 4px solid #f57c00;
            }}
            .status {{
                background-color: #e8f5e8;
                padding: 20px;
                text-align: center;
                border: 1px solid #4caf50;
                color: #2e7d32;
            }}
            .footer {{
                background-color: #f5f5f5;
                padding: 20px;
                text-align: center;
                font-size: 14px;
                color: #666666;
            }}
        </style>
    </head>
    <body>
        <div class="email-container">
            <div class="header">
                <h1>{title}</h1>
                <p>{tagline}</p>
            </div>
            <div class="body">
                {body}
            </div>
            <div class="status">
                <h3>{status_title}</h3>
                <p>{booked_on}</p>
            </div>
            <div class="footer">
                <p><strong>Need to reschedule?</strong><br>{footer_hint}</p>
                <p>This is an automated {kind} from {CLUB_NAME}.</p>
            </div>
        </div>
    </body>
    </html>
    """


def send_tutor_reminder_email(appointment: dict):
    student = f"""
            <div class="card">
                <h3>Student Information</h3>
                <p><strong>Name:</strong> {escape(appointment["studentName"])}</p>
                <p><strong>Email:</strong> {escape(appointment["email"])}</p>
                <p><strong>Phone:</strong> {escape(appointment.get("phone") or "Not provided")}</p>
                <p><strong>Grade:</strong> {escape(appointment["grade"])}</p>
            </div>"""
    message_html = _wrap(
        "Tutoring Session Reminder",
        "You have a tutoring session scheduled",
        _session_details(appointment) + student + _notes_block(appointment),
        "Session Confirmed",
        _booked_on(appointment.get("createdAt")),
        f"Contact the student directly or reach out to the {CLUB_NAME} coordinators.",
        "reminder",
    )
    subject = f"📅 Tutoring Session Reminder: {appointment['studentName']} - {appointment['subject']}"
    return send_email(appointment["tutor"]["email"], subject, message_html)


def send_student_confirmation_email(appointment: dict):
    tutor = f"""
            <div class="card">
                <h3>Tutor Information</h3>
                <p><strong>Name:</strong> {escape(appointment["tutor"]["name"])}</p>
                <p><strong>Email:</strong> {escape(appointment["tutor"]["email"])}</p>
            </div>"""
    message_html = _wrap(
        "Session Confirmed",
        "Your tutoring session has been booked successfully",
        _session_details(appointment) + tutor + _notes_block(appointment),
        "Booking Confirmed",
        _booked_on(appointment.get("createdAt")),
        f"Contact your tutor directly or reach out to the {CLUB_NAME} coordinators.",
        "confirmation",
    )
    subject = f"📅 Tutoring Session Confirmation: {appointment['subject']}"
    return send_email(appointment["email"], subject, message_html)


def notify_booking_confirmed(appointment: dict) -> None:
    """Send the tutor reminder, then the student confirmation.

    Runs after the booking is committed. Each message is attempted on its own
    and failures are only logged.
    """
    for recipient, sender in (("tutor", send_tutor_reminder_email), ("student", send_student_confirmation_email)):
        try:
            sent = sender(appointment)
        except Exception as e:
            logger.error(f"Error sending {recipient} email: {e}")
            continue
        if not sent:
            logger.error(f"Error sending {recipient} email: appointment {appointment['id']} was not delivered")


def sample_appointment(to_email: str) -> dict:
    return {
        "id": "test",
        "studentName": "Test Student",
        "email": "test@example.com",
        "phone": "(781) 555-0123",
        "grade": "10th Grade",
        "subject": "Mathematics",
        "className": "Algebra 1",
        "level": "Honors",
        "day": "monday",
        "time": "15:00",
        "notes": "This is a test appointment reminder email.",
        "createdAt": datetime.now().isoformat(),
        "tutor": {"name": "Test Tutor", "email": to_email},
    }
