"""
Outbound email for session creators and attendees.

Sending is best effort: every transport failure is logged and reported as
``False`` so the caller can mention it in an otherwise successful response.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from fastapi import Depends

from hobby_planner.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Mailer:
    """Thin SMTP client with a bounded timeout."""

    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.use_ssl = settings.SMTP_USE_SSL
        self.timeout = settings.SMTP_TIMEOUT
        self.username = settings.EMAIL_USER
        self.password = settings.EMAIL_PASS
        self.default_sender = settings.mail_sender
        self.frontend_url = settings.FRONTEND_URL.rstrip("/")

    def is_available(self) -> bool:
        return bool(self.username and self.password)

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            server.starttls()
        server.login(self.username, self.password)
        return server

    def verify(self) -> bool:
        """Check once that the SMTP server accepts our credentials."""
        if not self.is_available():
            logger.warning("EMAIL_USER/EMAIL_PASS not configured. Email notifications are disabled.")
            return False
        try:
            with self._connect():
                pass
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email transporter failed: {e}")
            return False
        logger.info("Email transporter is ready to send messages")
        return True

    def send(
        self,
        to: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
        sender: str | None = None,
    ) -> bool:
        if not self.is_available():
            logger.warning("Skipping email to %s: mail transport not configured", to)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = sender or self.default_sender
        msg["To"] = to
        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        try:
            with self._connect() as server:
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email to {to}: {e}")
            return False

        logger.info("Email sent to %s: %s", to, subject)
        return True

    def manage_link(self, management_code: str) -> str:
        return f"{self.frontend_url}/manage-session/{management_code}"

    def attendee_link(self, attendance_code: str) -> str:
        return f"{self.frontend_url}/attendee/{attendance_code}"

    def send_management_link(self, to: str, *, title: str, management_code: str) -> bool:
        link = self.manage_link(management_code)
        text_body = (
            f"Hi!\n\nYour session \"{title}\" was created successfully.\n\n"
            f"Manage it here:\n{link}\n\nKeep this link safe."
        )
        return self.send(to, "Your Hobby Session Management Link", text_body)

    def send_attendance_link(self, to: str, *, name: str, title: str, attendance_code: str) -> bool:
        link = self.attendee_link(attendance_code)
        text_body = f"Hi {name},\n\nHere is your session link:\n{link}\n\nSee you there!"
        html_body = (
            f"<p>Hi {name},</p>"
            f"<p>Here is your session link: <a href=\"{link}\">{link}</a></p>"
            f"<p>See you there!</p>"
        )
        return self.send(to, f"Your session: {title}", text_body, html_body)


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return Mailer(settings)
