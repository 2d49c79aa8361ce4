"""Notification service for reaching emergency contacts by email and SMS."""

import logging

import httpx
from twilio.rest import Client

from last_leaf.config import get_settings

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for sending notifications via email and SMS."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.timeout = 10.0
        self._twilio_client = None
        self._init_twilio()

    def _init_twilio(self) -> None:
        """Initialize Twilio client if credentials are available."""
        if (
            self.settings.twilio_account_sid
            and self.settings.twilio_auth_token
            and self.settings.twilio_phone_number
        ):
            self._twilio_client = Client(
                self.settings.twilio_account_sid,
                self.settings.twilio_auth_token,
            )
            logger.info("Twilio client initialized")
        else:
            logger.info("Twilio credentials not configured, SMS disabled")

    @property
    def email_enabled(self) -> bool:
        return bool(self.settings.email_api_key)

    @property
    def sms_enabled(self) -> bool:
        return self._twilio_client is not None

    def send_email(self, to: str, subject: str, body: str) -> bool:
        """
        Send a plain-text email through the configured email API.

        Returns True if the provider accepted the message.
        """
        if not self.email_enabled:
            logger.warning(f"Email API not configured, cannot email {to}")
            return False

        try:
            response = httpx.post(
                self.settings.email_api_url,
                headers={"Authorization": f"Bearer {self.settings.email_api_key}"},
                json={
                    "from": self.settings.email_from,
                    "to": [to],
                    "subject": subject,
                    "text": body,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.info(f"Email sent to {to}")
            return True
        except Exception as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

    def send_sms(self, phone_number: str, message: str) -> bool:
        """
        Send SMS via Twilio.

        Returns True if the SMS was sent successfully.
        """
        if not self._twilio_client:
            logger.warning("Twilio not available, cannot send SMS")
            return False

        try:
            sms = self._twilio_client.messages.create(
                body=message,
                from_=self.settings.twilio_phone_number,
                to=phone_number,
            )
            logger.info(f"SMS sent to {phone_number}, SID: {sms.sid}")
            return True
        except Exception as e:
            logger.error(f"Failed to send SMS to {phone_number}: {e}")
            return False


def get_notification_service() -> NotificationService:
    """Get a notification service instance."""
    return NotificationService()
