import logging
import smtplib
from email.message import EmailMessage

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

logger = logging.getLogger(__name__)


class NotificationSender:
    """
    Email (SMTP) + SMS (Twilio) delivery.

    Built once in create_app from the app config and handed to whoever
    needs to notify users. Every send returns (ok, error) and never raises
    for delivery problems, so callers decide whether a failure matters.
    """

    def __init__(self, config):
        self.smtp_host = config.get("SMTP_HOST")
        self.smtp_port = config.get("SMTP_PORT", 587)
        self.smtp_username = config.get("SMTP_USERNAME")
        self.smtp_password = config.get("SMTP_PASSWORD")
        self.from_email = config.get("SMTP_FROM_EMAIL") or self.smtp_username
        self.use_tls = config.get("SMTP_USE_TLS", True)

        self.twilio_sid = config.get("TWILIO_ACCOUNT_SID")
        self.twilio_token = config.get("TWILIO_AUTH_TOKEN")
        self.from_number = config.get("TWILIO_PHONE_NUMBER")
        self.country_code = config.get("SMS_COUNTRY_CODE", "+91")
        self._twilio = None

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.from_email)

    @property
    def sms_enabled(self) -> bool:
        return bool(self.twilio_sid and self.twilio_token and self.from_number)

    def send_email(self, to_email: str, subject: str, body: str):
        if not self.email_enabled:
            logger.info("Email not configured, skipping '%s' to %s", subject, to_email)
            return False, "Email not configured"

        msg = EmailMessage()
        msg["From"] = self.from_email
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(body)

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_username and self.smtp_password:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
            return True, None
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("Email to %s failed: %s", to_email, exc)
            return False, str(exc)

    def send_sms(self, to_number: str, body: str):
        if not self.sms_enabled:
            logger.info("SMS not configured, skipping message to %s", to_number)
            return False, "SMS not configured"
        if not to_number:
            return False, "No phone number"

        # local numbers are stored without the country prefix
        if not to_number.startswith("+"):
            to_number = f"{self.country_code}{to_number}"

        if self._twilio is None:
            self._twilio = Client(self.twilio_sid, self.twilio_token)

        try:
            self._twilio.messages.create(body=body, from_=self.from_number, to=to_number)
            return True, None
        except TwilioRestException as exc:
            logger.warning("SMS to %s failed: %s", to_number[-4:], exc)
            return False, str(exc)
