"""
Workflow states for house activities and houses.

``derive_status`` is the single place that decides which state an activity
is in. It only looks at field values, so it can be exercised without a
database.
"""
from django.db import models


class ActivityStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in_progress', 'In Progress'
    REVIEW = 'review', 'Review'
    COMPLETED = 'completed', 'Completed'
    BLOCKED = 'blocked', 'Blocked'
    REJECTED = 'rejected', 'Rejected'


class HouseStatus(models.TextChoices):
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    DELAYED = 'delayed', 'Delayed'


# Fields that feed the derivation, in precedence order.
DERIVATION_FIELDS = (
    'is_blocked',
    'rejected_remarks',
    'completion_date',
    'approved_by_id',
    'start_date',
)


def effective_value(current, changes, field):
    """Incoming value when the update carries the field, stored value otherwise."""
    if field in changes:
        return changes[field]
    return current.get(field)


def derive_status(current, changes=None):
    """
    Work out the activity status from its stored fields and an update.

    ``current`` and ``changes`` are mappings keyed by model field name.
    Only keys present in ``changes`` override ``current``; a key present with
    ``None`` clears the stored value.
    """
    changes = changes or {}

    if effective_value(current, changes, 'is_blocked'):
        return ActivityStatus.BLOCKED

    rejected_remarks = effective_value(current, changes, 'rejected_remarks')
    if rejected_remarks and rejected_remarks.strip():
        return ActivityStatus.REJECTED

    completion_date = effective_value(current, changes, 'completion_date')
    approved_by_id = effective_value(current, changes, 'approved_by_id')
    if completion_date and approved_by_id:
        return ActivityStatus.COMPLETED
    if completion_date:
        return ActivityStatus.REVIEW

    if effective_value(current, changes, 'start_date'):
        return ActivityStatus.IN_PROGRESS
    return ActivityStatus.PENDING


def first_transition_stamps(current, changes, status, now, explicit=False):
    """
    Dates stamped the first time an activity reaches a status.

    startDate is stamped when none was ever recorded and the activity lands
    in pending or review; completionDate when none was recorded and it lands
    in completed. Values supplied in the same update always win. A derived
    pending never stamps startDate, since a start date would derive to
    in_progress.
    """
    stamps = {}
    if not current.get('start_date') and 'start_date' not in changes:
        if status == ActivityStatus.REVIEW or (explicit and status == ActivityStatus.PENDING):
            stamps['start_date'] = now
    if (
        status == ActivityStatus.COMPLETED
        and not current.get('completion_date')
        and 'completion_date' not in changes
    ):
        stamps['completion_date'] = now
    return stamps


def compute_progress(completed, total):
    """Percentage of completed activities, 0 for a house without activities."""
    if total > 0:
        return completed / total * 100
    return 0.0


def derive_house_status(current_status, completed, total):
    """
    House status after its completed-activity count changed.

    Only two automatic moves exist: every activity done flips the house to
    completed, and losing a completed activity reopens a completed house as
    in_progress. Anything else keeps ``current_status``.
    """
    if total > 0 and completed == total and current_status != HouseStatus.COMPLETED:
        return HouseStatus.COMPLETED
    if completed < total and current_status == HouseStatus.COMPLETED:
        return HouseStatus.IN_PROGRESS
    return current_status
