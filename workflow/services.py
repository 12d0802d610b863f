"""
Activity status transitions and the progress rollup activity -> house -> project.

Callers run these inside ``transaction.atomic()``; any exception raised here
leaves every row as it was before the request.
"""
import logging
from dataclasses import dataclass, field

from django.db.models import Count, F, Q, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from activities.models import HouseActivity
from houses.models import House
from projects.models import Project

from .models import ActivityStatusHistory
from .permissions import authorize_activity_update
from .status import (
    ActivityStatus,
    HouseStatus,
    compute_progress,
    derive_house_status,
    derive_status,
    first_transition_stamps,
)

logger = logging.getLogger('workflow')


@dataclass
class ActivityUpdateResult:
    activity: HouseActivity
    previous_status: str
    house: House = None
    project_ids: list = field(default_factory=list)

    @property
    def status_changed(self):
        return self.activity.status != self.previous_status


def _crosses_completed(previous_status, new_status):
    return (previous_status == ActivityStatus.COMPLETED) != (new_status == ActivityStatus.COMPLETED)


def update_house_activity(activity, user, changes):
    """
    Apply a partial update to ``activity`` on behalf of ``user``.

    ``changes`` holds validated values keyed by model field name (``status``
    being the reviewer override). Returns an ActivityUpdateResult; ``house``
    is set when the update moved the activity into or out of completed.
    """
    decision = authorize_activity_update(user, activity, changes)
    allowed = dict(decision.allowed)

    explicit_status = allowed.pop('status', None)
    current = activity.workflow_state()
    previous_status = activity.status
    now = timezone.now()

    if explicit_status is not None:
        new_status = ActivityStatus(explicit_status)
    else:
        new_status = derive_status(current, allowed)

    stamps = first_transition_stamps(
        current, allowed, new_status, now, explicit=explicit_status is not None
    )

    for name, value in allowed.items():
        setattr(activity, name, value)
    for name, value in stamps.items():
        setattr(activity, name, value)
    if 'approved_by_id' in allowed and allowed['approved_by_id'] != current['approved_by_id']:
        activity.approved_at = now if allowed['approved_by_id'] else None
    activity.status = new_status
    activity.save()

    result = ActivityUpdateResult(activity=activity, previous_status=previous_status)

    if new_status != previous_status:
        ActivityStatusHistory.objects.create(
            house_activity=activity,
            previous_status=previous_status,
            new_status=new_status,
            changed_by=user,
            overridden=explicit_status is not None,
        )
        logger.info(
            f"Activity {activity.pk} {previous_status} -> {new_status}"
            f"{' (override)' if explicit_status is not None else ''} by {user.pk}"
        )

    if _crosses_completed(previous_status, new_status):
        house = House.objects.get(pk=activity.house_id)
        result.house, result.project_ids = refresh_house_progress(house)

    return result


def refresh_house_progress(house):
    """
    Recount the completed activities of ``house`` and derive its status.

    Counters and progress are always written. A house status change is
    propagated to its project. Returns the house and the ids of the projects
    whose counters moved.
    """
    completed = house.activities.filter(status=ActivityStatus.COMPLETED).count()
    total = house.total_activities
    previous_status = house.status

    house.completed_activities = completed
    house.progress = compute_progress(completed, total)
    house.status = derive_house_status(previous_status, completed, total)
    house.save(update_fields=[
        'completed_activities', 'total_activities', 'progress', 'status', 'updated_at',
    ])

    project_ids = []
    if house.status != previous_status:
        logger.info(f"House {house.pk} {previous_status} -> {house.status} ({completed}/{total})")
        project_ids = rollup_house_status(
            house.project_id, house.project_id, previous_status, house.status
        )
    return house, project_ids


def delete_house_activity(activity):
    """
    Remove one checklist item and recount its house.

    The house total shrinks by one, so removing the last open item can
    complete the house. Returns the house and the touched project ids.
    """
    house = House.objects.get(pk=activity.house_id)
    activity_id = activity.pk
    activity.delete()
    house.total_activities = house.activities.count()
    logger.info(f"Activity {activity_id} removed from house {house.pk}")
    return refresh_house_progress(house)


def _increment_houses_completed(project_id):
    Project.objects.filter(pk=project_id).update(
        houses_completed=F('houses_completed') + 1,
        last_updated_at=timezone.now(),
    )
    logger.info(f"Project {project_id} housesCompleted +1")


def _decrement_houses_completed(project_id):
    Project.objects.filter(pk=project_id).update(
        houses_completed=Greatest(F('houses_completed') - 1, Value(0)),
        last_updated_at=timezone.now(),
    )
    logger.info(f"Project {project_id} housesCompleted -1")


def rollup_house_status(previous_project_id, new_project_id, previous_status, new_status):
    """
    Keep Project.houses_completed in step with a house transition.

    Handles both a status change within one project and a move between
    projects, where the old project loses the house and the new one gains it
    according to the status it ends up with. Returns the touched project ids.
    """
    touched = []
    was_completed = previous_status == HouseStatus.COMPLETED
    is_completed = new_status == HouseStatus.COMPLETED

    if previous_project_id != new_project_id:
        if previous_project_id and was_completed:
            _decrement_houses_completed(previous_project_id)
            touched.append(previous_project_id)
        if new_project_id and is_completed:
            _increment_houses_completed(new_project_id)
            touched.append(new_project_id)
    elif new_project_id and was_completed != is_completed:
        if is_completed:
            _increment_houses_completed(new_project_id)
        else:
            _decrement_houses_completed(new_project_id)
        touched.append(new_project_id)
    return touched


def recount_project_progress(project=None, dry_run=False):
    """
    Rebuild the incrementally maintained counters from the activity rows.

    Recomputes total/completed activities, progress and derived status of
    every house (or only the houses of ``project``), then housesCompleted of
    the affected projects. Safe to run repeatedly. Returns a list of dicts
    describing each correction.
    """
    houses = House.objects.annotate(
        activity_count=Count('activities'),
        completed_count=Count('activities', filter=Q(activities__status=ActivityStatus.COMPLETED)),
    )
    projects = Project.objects.all()
    if project is not None:
        houses = houses.filter(project=project)
        projects = projects.filter(pk=project.pk)

    corrections = []
    # Completed-house deltas not yet written, per project (dry run only)
    pending = {}
    for house in houses:
        total = house.activity_count
        completed = house.completed_count
        progress = compute_progress(completed, total)
        status = derive_house_status(house.status, completed, total)
        if (
            house.total_activities != total
            or house.completed_activities != completed
            or abs(house.progress - progress) > 1e-9
            or house.status != status
        ):
            corrections.append({
                'house': str(house.pk),
                'totalActivities': [house.total_activities, total],
                'completedActivities': [house.completed_activities, completed],
                'status': [house.status, status],
            })
            if dry_run:
                delta = (status == HouseStatus.COMPLETED) - (house.status == HouseStatus.COMPLETED)
                pending[house.project_id] = pending.get(house.project_id, 0) + delta
            else:
                House.objects.filter(pk=house.pk).update(
                    total_activities=total,
                    completed_activities=completed,
                    progress=progress,
                    status=status,
                    updated_at=timezone.now(),
                )

    for item in projects.annotate(
        completed_count=Count('houses', filter=Q(houses__status=HouseStatus.COMPLETED))
    ):
        completed = item.completed_count + pending.get(item.pk, 0)
        if item.houses_completed != completed:
            corrections.append({
                'project': str(item.pk),
                'housesCompleted': [item.houses_completed, completed],
            })
            if not dry_run:
                Project.objects.filter(pk=item.pk).update(
                    houses_completed=completed,
                    last_updated_at=timezone.now(),
                )

    logger.info(
        f"Recount {'(dry run) ' if dry_run else ''}"
        f"{'project ' + str(project.pk) if project is not None else 'all projects'}: "
        f"{len(corrections)} correction(s)"
    )
    return corrections
