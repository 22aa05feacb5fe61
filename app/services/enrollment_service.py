# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: add a user to a mailing list.

The operation is three steps in a fixed order: resolve the user, notify
them, persist the membership. Collaborators are passed in on the request;
when one is omitted its default is built at call time, so callers that
supply both never load the storage or delivery implementations.
"""
from dataclasses import dataclass
from typing import Optional

from app.core.config import LOOKUP_MODES, NOTIFICATION_FAILURE_POLICIES, settings
from app.core.exceptions import EnrollmentError, InvalidEnrollmentRequest, NotificationError
from app.core.logging import get_logger
from app.metrics import ENROLLMENT_DURATION, ENROLLMENT_NOTIFICATIONS, ENROLLMENTS
from app.models.domain import User
from app.services.ports import Notifier, UserDirectory

logger = get_logger(__name__)


@dataclass(frozen=True)
class EnrollmentRequest:
    """Argument bundle for :func:`enroll`.

    ``lookup`` is ``"find_or_create"`` (self-service signup) or ``"strict"``
    (the account must already exist). ``notification_failure`` is
    ``"raise"`` or ``"ignore"``. Both fall back to settings when ``None``.
    """

    username: str
    list_id: str
    user_directory: Optional[UserDirectory] = None
    notifier: Optional[Notifier] = None
    lookup: Optional[str] = None
    notification_failure: Optional[str] = None


def default_user_directory() -> UserDirectory:
    from app.core.dependencies import get_user_directory
    return get_user_directory()


def default_notifier() -> Notifier:
    from app.core.dependencies import get_notifier
    return get_notifier()


def _require(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidEnrollmentRequest(f"{field} must be a non-empty string", field=field)
    return value.strip()


def _choice(value: Optional[str], default: str, allowed: tuple[str, ...], field: str) -> str:
    chosen = value or default
    if chosen not in allowed:
        raise InvalidEnrollmentRequest(f"{field} must be one of {allowed}", field=field)
    return chosen


def _resolve_user(directory: UserDirectory, username: str, lookup: str) -> User:
    if lookup == "strict":
        return directory.find_by_username(username)
    return directory.find_or_create(username)


def _send_notification(notifier: Notifier, user: User, list_id: str, on_failure: str) -> None:
    try:
        notifier.notify(user, list_id)
    except NotificationError as exc:
        if on_failure != "ignore":
            ENROLLMENT_NOTIFICATIONS.labels(status="failed").inc()
            raise
        ENROLLMENT_NOTIFICATIONS.labels(status="suppressed").inc()
        logger.warning("Notification failed, continuing enrollment user=%s list=%s: %s",
                       user.username, list_id, exc.message)
        return
    ENROLLMENT_NOTIFICATIONS.labels(status="sent").inc()


def enroll(request: EnrollmentRequest) -> User:
    """Enroll ``request.username`` in ``request.list_id`` and return the updated user.

    Raises NotFoundError (strict lookup, no such user), NotificationError
    (notifier failed; the membership is not written) or PersistenceError
    (directory could not create or update the record).
    """
    try:
        username = _require(request.username, "username")
        list_id = _require(request.list_id, "list_id")
        lookup = _choice(request.lookup, settings.USER_LOOKUP_MODE, LOOKUP_MODES, "lookup")
        on_failure = _choice(request.notification_failure, settings.NOTIFICATION_FAILURE_POLICY,
                             NOTIFICATION_FAILURE_POLICIES, "notification_failure")
    except InvalidEnrollmentRequest:
        ENROLLMENTS.labels(outcome=InvalidEnrollmentRequest.code).inc()
        raise

    directory = request.user_directory if request.user_directory is not None else default_user_directory()
    notifier = request.notifier if request.notifier is not None else default_notifier()

    with ENROLLMENT_DURATION.time():
        try:
            user = _resolve_user(directory, username, lookup)
            _send_notification(notifier, user, list_id, on_failure)
            updated = directory.update(user, {"list_membership": list_id})
        except EnrollmentError as exc:
            ENROLLMENTS.labels(outcome=exc.code).inc()
            logger.info("Enrollment failed user=%s list=%s error=%s", username, list_id, exc.code)
            raise

    ENROLLMENTS.labels(outcome="enrolled").inc()
    logger.info("User enrolled user=%s list=%s previous=%s",
                username, list_id, user.list_membership)
    return updated
