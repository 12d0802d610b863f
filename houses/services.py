import logging

from django.utils import timezone

from activities.models import Activity, HouseActivity
from projects.models import Project
from workflow.exceptions import InvalidReference, NoActiveActivities
from workflow.services import rollup_house_status
from workflow.status import ActivityStatus, HouseStatus, compute_progress, derive_house_status

from .models import House

logger = logging.getLogger('houses')


def _check_project(project_id):
    if project_id and not Project.objects.filter(pk=project_id).exists():
        raise InvalidReference('Project not found')


def create_house(data):
    """
    Create a house and its checklist, one pending activity per active template.

    Must run inside a transaction: a failure while copying the templates
    removes the house as well. Returns the house and the number of
    activities created.
    """
    project_id = data.get('project_id')
    _check_project(project_id)

    house = House.objects.create(
        project_id=project_id,
        coto=data.get('coto') or None,
        name=data['name'],
        model=data.get('model') or None,
        status=data.get('status') or HouseStatus.IN_PROGRESS,
        progress=0,
        description=data.get('description') or None,
        house_image=data.get('house_image') or None,
        m2const=data.get('m2const'),
        completed_activities=0,
        total_activities=0,
    )

    templates = list(Activity.objects.filter(is_active=True).order_by('num'))
    if not templates:
        raise NoActiveActivities()

    open_date = timezone.now()
    HouseActivity.objects.bulk_create([
        HouseActivity(
            house=house,
            template=template,
            num=template.num,
            phase=template.phase,
            sub_phase=template.sub_phase,
            activity=template.activity,
            dependance=template.dependance,
            description=template.description,
            open_date=open_date,
            status=ActivityStatus.PENDING,
        )
        for template in templates
    ])

    house.total_activities = len(templates)
    house.save(update_fields=['total_activities', 'updated_at'])

    if house.status == HouseStatus.COMPLETED:
        rollup_house_status(None, project_id, None, house.status)

    logger.info(f"House {house.pk} created with {len(templates)} activities")
    return house, len(templates)


def update_house(house, changes):
    """
    Apply a partial update to ``house``.

    Progress follows the effective activity counters. Without an explicit
    status the house status is derived from them; an explicit status is
    stored as given. Project counters follow the status and affiliation
    change. Returns the ids of the projects whose counters moved.
    """
    if 'project_id' in changes:
        _check_project(changes['project_id'])

    previous_status = house.status
    previous_project_id = house.project_id

    for name, value in changes.items():
        setattr(house, name, value)

    house.progress = compute_progress(house.completed_activities, house.total_activities)
    if 'status' not in changes:
        house.status = derive_house_status(previous_status, house.completed_activities, house.total_activities)
    house.save()

    project_ids = rollup_house_status(previous_project_id, house.project_id, previous_status, house.status)
    if house.status != previous_status or previous_project_id != house.project_id:
        logger.info(
            f"House {house.pk} status {previous_status} -> {house.status}, "
            f"project {previous_project_id} -> {house.project_id}"
        )
    return project_ids


def delete_house(house):
    """Delete ``house`` and its checklist, releasing its slot in the project counter."""
    house_id = house.pk
    project_id = house.project_id
    was_status = house.status
    house.delete()
    if project_id and was_status == HouseStatus.COMPLETED:
        rollup_house_status(project_id, project_id, was_status, None)
    logger.info(f"House {house_id} deleted")
