# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Notifiers — tell a user they were added to a mailing list.

HttpNotifier posts to the platform notification-service; LogNotifier is the
mock channel used when no notification service is configured.
"""
from typing import Optional

import httpx

from app.core.exceptions import NotificationError
from app.core.logging import get_logger
from app.models.domain import User

logger = get_logger(__name__)


def enrollment_message(list_id: str) -> str:
    return f"You have been added to the mailing list '{list_id}'."


class HttpNotifier:
    def __init__(self, base_url: str, timeout: float = 3.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/api/v1/notify"

    def notify(self, user: User, list_id: str) -> None:
        # notification-service requires incident_id; it carries the list id here
        payload = {
            "incident_id": list_id,
            "channel": "email",
            "recipient": user.username,
            "message": enrollment_message(list_id),
            "severity": None,
            "metadata": {"list_id": list_id, "event": "list_enrollment"},
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Notification service unreachable: %s", exc)
            raise NotificationError(
                f"Could not notify '{user.username}' about '{list_id}': {exc}",
                username=user.username, list_id=list_id,
            ) from exc

        if resp.status_code >= 300:
            logger.warning("Notification service returned %s for user=%s list=%s",
                           resp.status_code, user.username, list_id)
            raise NotificationError(
                f"Notification service answered {resp.status_code} for '{user.username}'",
                username=user.username, list_id=list_id, status_code=resp.status_code,
            )
        logger.info("Notification sent user=%s list=%s status=%s",
                    user.username, list_id, resp.status_code)


class LogNotifier:
    def notify(self, user: User, list_id: str) -> None:
        logger.info("[MOCK EMAIL] To: %s | Subject: Welcome to %s | Body: %s",
                    user.username, list_id, enrollment_message(list_id))
