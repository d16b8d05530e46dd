"""
Notification Service - broadcast a message to a set of students.

Notifications are embedded in each student document. A broadcast is a
single update_many with $push; reads sort newest first.
"""

import logging
from datetime import datetime
from typing import Iterable, List

from bson import ObjectId

from placement_portal.core.errors import NotFoundError, ValidationError
from placement_portal.services.mongo_service import StudentService, to_object_id

logger = logging.getLogger(__name__)


def send_notification(company_name: str, message: str, student_ids: Iterable[str]) -> int:
    """
    Append a notification to every targeted student's inbox.

    Args:
        company_name: Company the notification is about
        message: Text shown to the student
        student_ids: Student ids as strings; duplicates are collapsed

    Returns:
        Number of students actually updated (ids that no longer exist are skipped)

    Raises:
        ValidationError: blank company name or message, no ids, or a malformed id
    """
    company_name = (company_name or "").strip()
    message = (message or "").strip()
    ids = list(dict.fromkeys(student_ids or []))

    if not company_name or not message or not ids:
        raise ValidationError("Please provide company name, message, and eligible students.")

    object_ids = [to_object_id(student_id) for student_id in ids]
    notification = {
        "company_name": company_name,
        "message": message,
        "timestamp": datetime.utcnow(),
    }

    modified = StudentService().push_notification(object_ids, notification)
    logger.info(
        "Notification for %s sent to %d of %d students", company_name, modified, len(object_ids)
    )
    return modified


def get_notifications(student_id: ObjectId) -> List[dict]:
    """Student's notifications, most recent first."""
    notifications = StudentService().get_notifications(student_id)
    if notifications is None:
        raise NotFoundError("Student not found")
    return sorted(notifications, key=lambda n: n["timestamp"], reverse=True)
