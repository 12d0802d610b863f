"""
Field level write permissions for house activity updates.

Every update is checked once against ``FIELD_CAPABILITIES``:

* ``ALLOW``: the role may always write the field.
* ``OWN``: the role may write the field only on activities assigned to the
  caller, or while assigning an unassigned activity to themselves.
* missing: the role may never write the field.
"""
import logging
from dataclasses import dataclass, field

from authentication.models import Role

from .exceptions import ForbiddenActivityUpdate, NoPermittedChanges

logger = logging.getLogger('workflow')

ALLOW = 'allow'
OWN = 'own'

SURVEYOR_FIELDS = ('start_date', 'completion_date', 'remarks', 'app_user_id')
REVIEWER_FIELDS = SURVEYOR_FIELDS + ('is_blocked', 'rejected_remarks', 'approved_by_id', 'status')

FIELD_CAPABILITIES = {
    Role.SURVEYOR: {name: OWN for name in SURVEYOR_FIELDS},
    Role.REVIEWER: {name: ALLOW for name in REVIEWER_FIELDS},
    Role.ADMIN: {name: ALLOW for name in REVIEWER_FIELDS},
}


@dataclass(frozen=True)
class WriteDecision:
    role: str
    allowed: dict = field(default_factory=dict)
    denied: tuple = ()


def _owns_activity(user, activity, changes):
    assignee = activity.app_user_id
    if 'app_user_id' in changes:
        # Only self-assignment, and never taking over someone else's activity
        if changes['app_user_id'] != user.id:
            return False
        return assignee is None or assignee == user.id
    return assignee == user.id


def authorize_activity_update(user, activity, changes):
    """
    Split ``changes`` into the fields ``user`` may write and those it may not.

    Raises NoPermittedChanges for an empty update and ForbiddenActivityUpdate
    when nothing is writable or an ownership-restricted field is touched on
    somebody else's activity. Fields the role cannot write are dropped when
    other fields remain.
    """
    if not changes:
        raise NoPermittedChanges()

    role = getattr(user, 'role', None)
    capabilities = FIELD_CAPABILITIES.get(role, {})

    allowed = {}
    denied = []
    for name, value in changes.items():
        if name in capabilities:
            allowed[name] = value
        else:
            denied.append(name)

    if not allowed:
        logger.warning(f"Role {role} attempted to change {sorted(denied)} on activity {activity.pk}")
        raise ForbiddenActivityUpdate(
            f"Role '{role}' is not allowed to change: {', '.join(sorted(denied))}"
        )

    needs_ownership = any(capabilities[name] == OWN for name in allowed)
    if needs_ownership and not _owns_activity(user, activity, allowed):
        logger.warning(f"User {user.pk} denied update on activity {activity.pk} assigned to {activity.app_user_id}")
        raise ForbiddenActivityUpdate()

    if denied:
        logger.info(f"Ignoring fields {sorted(denied)} from {role} {user.pk} on activity {activity.pk}")

    return WriteDecision(role=role, allowed=allowed, denied=tuple(sorted(denied)))
