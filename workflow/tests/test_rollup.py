from io import StringIO

from django.core.management import call_command
from django.db import transaction
from django.test import TestCase
from django.utils import timezone

from activities.models import Activity, HouseActivity
from authentication.models import Role
from houses.models import House
from houses.services import create_house, delete_house, update_house
from projects.models import Project
from workflow.exceptions import ForbiddenActivityUpdate, NoActiveActivities
from workflow.models import ActivityStatusHistory
from workflow.services import (
    delete_house_activity,
    recount_project_progress,
    update_house_activity,
)
from workflow.status import ActivityStatus, HouseStatus, derive_status

from .factories import make_project, make_templates, make_user


class RollupTestCase(TestCase):
    def setUp(self):
        make_templates(3)
        self.reviewer = make_user('reviewer@example.com', role=Role.REVIEWER)
        self.surveyor = make_user('surveyor@example.com')
        self.project = make_project()
        self.house, self.count = create_house({'project_id': self.project.pk, 'name': 'Lote 12', 'coto': 'A'})

    def activities(self):
        return list(HouseActivity.objects.filter(house=self.house).order_by('num'))

    def approve(self, activity):
        return update_house_activity(
            activity,
            self.reviewer,
            {'completion_date': timezone.now(), 'approved_by_id': self.reviewer.pk},
        )

    def complete_house(self):
        for activity in self.activities():
            self.approve(activity)
        self.house.refresh_from_db()
        self.project.refresh_from_db()


class CreateHouseTests(RollupTestCase):
    def test_checklist_is_copied_from_active_templates(self):
        self.assertEqual(self.count, 3)
        activities = self.activities()
        self.assertEqual([a.num for a in activities], [1, 2, 3])
        self.assertTrue(all(a.status == ActivityStatus.PENDING for a in activities))
        self.assertEqual(activities[1].dependance, [1])
        self.house.refresh_from_db()
        self.assertEqual(self.house.total_activities, 3)
        self.assertEqual(self.house.completed_activities, 0)
        self.assertEqual(self.house.progress, 0)

    def test_retired_templates_are_skipped(self):
        make_templates(2, start=10, is_active=False)
        house, count = create_house({'name': 'Lote 13'})
        self.assertEqual(count, 3)
        self.assertEqual(house.activities.count(), 3)

    def test_no_active_templates_rolls_back_the_house(self):
        Activity.objects.update(is_active=False)
        before = House.objects.count()
        with self.assertRaises(NoActiveActivities):
            with transaction.atomic():
                create_house({'name': 'Lote 99'})
        self.assertEqual(House.objects.count(), before)


class HouseCompletionTests(RollupTestCase):
    def test_partial_progress(self):
        first = self.activities()[0]
        result = self.approve(first)
        self.assertEqual(result.activity.status, ActivityStatus.COMPLETED)
        self.assertEqual(result.house.completed_activities, 1)
        self.assertAlmostEqual(result.house.progress, 100 / 3)
        self.assertEqual(result.house.status, HouseStatus.IN_PROGRESS)
        self.assertEqual(result.project_ids, [])

    def test_last_activity_completes_house_and_counts_project_once(self):
        self.complete_house()
        self.assertEqual(self.house.status, HouseStatus.COMPLETED)
        self.assertEqual(self.house.progress, 100)
        self.assertEqual(self.house.completed_activities, 3)
        self.assertEqual(self.project.houses_completed, 1)

    def test_blocking_a_completed_activity_reopens_house(self):
        self.complete_house()
        activity = self.activities()[1]
        result = update_house_activity(activity, self.reviewer, {'is_blocked': True})

        activity.refresh_from_db()
        self.assertEqual(activity.status, ActivityStatus.BLOCKED)
        self.assertIsNotNone(activity.completion_date)
        self.assertEqual(activity.approved_by_id, self.reviewer.pk)

        self.house.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(self.house.completed_activities, 2)
        self.assertEqual(self.house.status, HouseStatus.IN_PROGRESS)
        self.assertEqual(self.project.houses_completed, 0)
        self.assertEqual(result.project_ids, [self.project.pk])

    def test_project_counter_is_floored_at_zero(self):
        self.complete_house()
        Project.objects.filter(pk=self.project.pk).update(houses_completed=0)
        update_house_activity(self.activities()[0], self.reviewer, {'is_blocked': True})
        self.project.refresh_from_db()
        self.assertEqual(self.project.houses_completed, 0)

    def test_house_without_project_completes_without_rollup(self):
        house, _ = create_house({'name': 'Suelta'})
        for activity in house.activities.all():
            result = self.approve(activity)
        house.refresh_from_db()
        self.assertEqual(house.status, HouseStatus.COMPLETED)
        self.assertEqual(result.project_ids, [])

    def test_completed_activities_matches_stored_statuses(self):
        activities = self.activities()
        self.approve(activities[0])
        self.approve(activities[1])
        update_house_activity(activities[0], self.reviewer, {'rejected_remarks': 'Redo'})
        self.house.refresh_from_db()
        completed = HouseActivity.objects.filter(
            house=self.house, status=ActivityStatus.COMPLETED
        ).count()
        self.assertEqual(self.house.completed_activities, completed)
        self.assertEqual(completed, 1)


class ActivityUpdateTests(RollupTestCase):
    def test_repeated_payload_is_idempotent(self):
        activity = self.activities()[0]
        payload = {'completion_date': timezone.now(), 'approved_by_id': self.reviewer.pk}
        update_house_activity(activity, self.reviewer, dict(payload))
        activity.refresh_from_db()
        approved_at = activity.approved_at

        result = update_house_activity(activity, self.reviewer, dict(payload))
        activity.refresh_from_db()

        self.assertFalse(result.status_changed)
        self.assertIsNone(result.house)
        self.assertEqual(activity.status, ActivityStatus.COMPLETED)
        self.assertEqual(activity.approved_at, approved_at)
        self.assertEqual(ActivityStatusHistory.objects.filter(house_activity=activity).count(), 1)
        self.house.refresh_from_db()
        self.assertEqual(self.house.completed_activities, 1)

    def test_completion_without_approval_goes_to_review_and_stamps_start(self):
        activity = self.activities()[0]
        update_house_activity(activity, self.reviewer, {'completion_date': timezone.now()})
        activity.refresh_from_db()
        self.assertEqual(activity.status, ActivityStatus.REVIEW)
        self.assertIsNotNone(activity.start_date)

    def test_stored_status_rederives_after_update(self):
        activity = self.activities()[0]
        update_house_activity(activity, self.reviewer, {'start_date': timezone.now(), 'remarks': 'go'})
        activity.refresh_from_db()
        self.assertEqual(activity.status, derive_status(activity.workflow_state()))

    def test_explicit_status_is_stored_verbatim_and_flagged(self):
        activity = self.activities()[0]
        update_house_activity(activity, self.reviewer, {'status': ActivityStatus.REVIEW})
        activity.refresh_from_db()
        self.assertEqual(activity.status, ActivityStatus.REVIEW)
        self.assertIsNotNone(activity.start_date)
        history = ActivityStatusHistory.objects.get(house_activity=activity)
        self.assertTrue(history.overridden)
        self.assertEqual(history.previous_status, ActivityStatus.PENDING)
        self.assertEqual(history.changed_by, self.reviewer)

    def test_explicit_completed_rolls_up(self):
        for activity in self.activities():
            update_house_activity(activity, self.reviewer, {'status': ActivityStatus.COMPLETED})
        self.house.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(self.house.status, HouseStatus.COMPLETED)
        self.assertEqual(self.project.houses_completed, 1)

    def test_clearing_approval_clears_approved_at(self):
        activity = self.activities()[0]
        self.approve(activity)
        update_house_activity(activity, self.reviewer, {'approved_by_id': None})
        activity.refresh_from_db()
        self.assertIsNone(activity.approved_at)
        self.assertEqual(activity.status, ActivityStatus.REVIEW)

    def test_forbidden_update_changes_nothing(self):
        other = make_user('other@example.com')
        activity = self.activities()[0]
        activity.app_user = other
        activity.save()
        with self.assertRaises(ForbiddenActivityUpdate):
            with transaction.atomic():
                update_house_activity(activity, self.surveyor, {'remarks': 'not mine'})
        activity.refresh_from_db()
        self.assertIsNone(activity.remarks)

    def test_deleting_last_open_activity_completes_house(self):
        first, second, third = self.activities()
        self.approve(first)
        self.approve(second)
        house, project_ids = delete_house_activity(third)
        self.assertEqual(house.total_activities, 2)
        self.assertEqual(house.status, HouseStatus.COMPLETED)
        self.assertEqual(project_ids, [self.project.pk])


class HouseRollupTests(RollupTestCase):
    def test_moving_completed_house_between_projects(self):
        self.complete_house()
        other = make_project(title='Creekside II')
        project_ids = update_house(self.house, {'project_id': other.pk})
        self.project.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(self.project.houses_completed, 0)
        self.assertEqual(other.houses_completed, 1)
        self.assertEqual(project_ids, [self.project.pk, other.pk])

    def test_explicit_house_status_is_stored(self):
        update_house(self.house, {'status': HouseStatus.DELAYED})
        self.house.refresh_from_db()
        self.assertEqual(self.house.status, HouseStatus.DELAYED)

    def test_counter_update_recomputes_progress_and_status(self):
        update_house(self.house, {'completed_activities': 3})
        self.house.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(self.house.progress, 100)
        self.assertEqual(self.house.status, HouseStatus.COMPLETED)
        self.assertEqual(self.project.houses_completed, 1)

    def test_deleting_completed_house_releases_project_slot(self):
        self.complete_house()
        delete_house(self.house)
        self.project.refresh_from_db()
        self.assertEqual(self.project.houses_completed, 0)
        self.assertFalse(HouseActivity.objects.filter(house_id=self.house.pk).exists())


class RecountTests(RollupTestCase):
    def corrupt(self):
        self.complete_house()
        House.objects.filter(pk=self.house.pk).update(completed_activities=1, progress=10, total_activities=5)
        Project.objects.filter(pk=self.project.pk).update(houses_completed=4)

    def test_recount_repairs_counters(self):
        self.corrupt()
        corrections = recount_project_progress()
        self.assertEqual(len(corrections), 2)

        self.house.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(self.house.total_activities, 3)
        self.assertEqual(self.house.completed_activities, 3)
        self.assertEqual(self.house.progress, 100)
        self.assertEqual(self.project.houses_completed, 1)

    def test_recount_is_idempotent(self):
        self.corrupt()
        recount_project_progress()
        self.assertEqual(recount_project_progress(), [])

    def test_dry_run_writes_nothing(self):
        self.corrupt()
        corrections = recount_project_progress(dry_run=True)
        self.assertEqual(len(corrections), 2)
        self.project.refresh_from_db()
        self.assertEqual(self.project.houses_completed, 4)

    def test_recount_limited_to_one_project(self):
        self.corrupt()
        other = make_project(title='Other')
        Project.objects.filter(pk=other.pk).update(houses_completed=2)
        recount_project_progress(self.project)
        other.refresh_from_db()
        self.assertEqual(other.houses_completed, 2)

    def test_management_command(self):
        self.corrupt()
        out = StringIO()
        call_command('recount_progress', '--project', str(self.project.pk), stdout=out)
        self.assertIn('2 correction(s) applied', out.getvalue())
        self.project.refresh_from_db()
        self.assertEqual(self.project.houses_completed, 1)

    def test_management_command_dry_run(self):
        self.corrupt()
        out = StringIO()
        call_command('recount_progress', '--dry-run', stdout=out)
        self.assertIn('would be applied', out.getvalue())
        self.project.refresh_from_db()
        self.assertEqual(self.project.houses_completed, 4)
