# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: E-mail client — inter-service communication.
Hands rendered reminders to the notification service over HTTP. With no
service URL configured, delivery is mocked and only logged.
"""

import httpx

from squarehead.core.config import settings
from squarehead.core.logging import get_logger
from squarehead.models.domain import Dispatch, RenderedMessage, SendResult

logger = get_logger(__name__)


class EmailClient:
    """Reminder e-mail sender backed by the notification service."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self._base_url = settings.EMAIL_SERVICE_URL if base_url is None else base_url
        self._timeout = timeout or settings.EMAIL_TIMEOUT

    @property
    def is_mock(self) -> bool:
        return not self._base_url

    def send(self, dispatch: Dispatch, message: RenderedMessage) -> SendResult:
        """Send one reminder. Transport failures are returned, never raised."""
        if self.is_mock:
            logger.info(
                "[MOCK EMAIL] To: %s | Subject: %s | Body: %s",
                dispatch.recipient_email, message.subject, message.text_body,
            )
            return SendResult(ok=True)

        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.post(
                    f"{self._base_url}/api/v1/notify",
                    json={
                        "channel": "email",
                        "recipient": dispatch.recipient_email,
                        "subject": message.subject,
                        "message": message.text_body,
                        "html": message.html_body,
                        "metadata": {
                            "member_id": dispatch.member_id,
                            "dance_date": dispatch.dance_date.isoformat(),
                            "days_until": dispatch.days_until,
                        },
                    },
                )
        except httpx.HTTPError as exc:
            logger.warning("Email send failed: recipient=%s, error=%s", dispatch.recipient_email, exc)
            return SendResult(ok=False, error=str(exc))

        if resp.status_code >= 300:
            logger.warning(
                "Email service rejected message: recipient=%s, status=%d",
                dispatch.recipient_email, resp.status_code,
            )
            return SendResult(ok=False, error=f"HTTP {resp.status_code}")

        logger.info(
            "Email sent: recipient=%s, dance_date=%s, status=%d",
            dispatch.recipient_email, dispatch.dance_date.isoformat(), resp.status_code,
        )
        return SendResult(ok=True)
