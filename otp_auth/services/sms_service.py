"""
SMS Service using Twilio.

Delivers one-time codes. Without Twilio credentials the code is written to
the log instead, which is the development workflow.
"""

import logging
from typing import Optional

from twilio.rest import Client

from ..config import TwilioConfig

logger = logging.getLogger(__name__)


class SMSService:
    """Out-of-band delivery of verification codes."""

    def __init__(self, config: Optional[TwilioConfig] = None, client: Optional[Client] = None):
        self.config = config or TwilioConfig()
        self._client = client

        if self._client is None and self.config.is_configured():
            try:
                self._client = Client(self.config.account_sid, self.config.auth_token)
                logger.info("Twilio SMS service initialized")
            except Exception as e:
                logger.error(f"Failed to initialize Twilio: {e}")

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured."""
        return self._client is not None and self.config.from_number is not None

    def send_otp(self, to_phone: str, code: str) -> dict:
        """
        Deliver a verification code.

        Delivery problems are logged and reported in the result; they never
        fail the OTP request itself.

        Args:
            to_phone: Destination phone number in E.164 format
            code: The 6-digit code

        Returns:
            Dict with success status and message SID, channel or error
        """
        if not self.is_configured():
            logger.info(f"OTP for {to_phone}: {code}")
            return {"success": True, "channel": "log"}

        try:
            message = self._client.messages.create(
                body=f"Your verification code is {code}",
                from_=self.config.from_number,
                to=to_phone
            )
            logger.info(f"OTP SMS sent to {to_phone}: {message.sid}")
            return {"success": True, "channel": "sms", "sid": message.sid}
        except Exception as e:
            logger.error(f"OTP SMS send failed to {to_phone}: {e}")
            return {"success": False, "error": str(e)}
