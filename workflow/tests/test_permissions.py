import uuid
from types import SimpleNamespace

from django.test import SimpleTestCase

from authentication.models import Role
from workflow.exceptions import ForbiddenActivityUpdate, NoPermittedChanges
from workflow.permissions import authorize_activity_update


def user(role):
    user_id = uuid.uuid4()
    return SimpleNamespace(id=user_id, pk=user_id, role=role)


def activity(assignee=None):
    return SimpleNamespace(pk=uuid.uuid4(), app_user_id=assignee)


class AuthorizeActivityUpdateTests(SimpleTestCase):
    def setUp(self):
        self.surveyor = user(Role.SURVEYOR)
        self.reviewer = user(Role.REVIEWER)

    def test_empty_update_is_rejected(self):
        with self.assertRaises(NoPermittedChanges):
            authorize_activity_update(self.reviewer, activity(), {})

    def test_surveyor_updates_own_activity(self):
        decision = authorize_activity_update(
            self.surveyor, activity(self.surveyor.id), {'remarks': 'Poured', 'start_date': None}
        )
        self.assertEqual(decision.allowed, {'remarks': 'Poured', 'start_date': None})
        self.assertEqual(decision.denied, ())

    def test_surveyor_cannot_touch_someone_elses_activity(self):
        with self.assertRaises(ForbiddenActivityUpdate):
            authorize_activity_update(self.surveyor, activity(uuid.uuid4()), {'remarks': 'x'})

    def test_surveyor_cannot_touch_unassigned_activity_without_claiming_it(self):
        with self.assertRaises(ForbiddenActivityUpdate):
            authorize_activity_update(self.surveyor, activity(None), {'remarks': 'x'})

    def test_surveyor_claims_unassigned_activity(self):
        decision = authorize_activity_update(
            self.surveyor, activity(None), {'app_user_id': self.surveyor.id, 'remarks': 'mine'}
        )
        self.assertEqual(decision.allowed['app_user_id'], self.surveyor.id)

    def test_surveyor_cannot_assign_another_user(self):
        with self.assertRaises(ForbiddenActivityUpdate):
            authorize_activity_update(self.surveyor, activity(None), {'app_user_id': uuid.uuid4()})

    def test_surveyor_cannot_take_over_assigned_activity(self):
        with self.assertRaises(ForbiddenActivityUpdate):
            authorize_activity_update(
                self.surveyor, activity(uuid.uuid4()), {'app_user_id': self.surveyor.id}
            )

    def test_surveyor_only_reviewer_fields_is_forbidden(self):
        with self.assertRaises(ForbiddenActivityUpdate):
            authorize_activity_update(
                self.surveyor, activity(self.surveyor.id), {'is_blocked': True, 'status': 'completed'}
            )

    def test_reviewer_fields_are_dropped_from_mixed_surveyor_update(self):
        decision = authorize_activity_update(
            self.surveyor, activity(self.surveyor.id), {'remarks': 'ok', 'approved_by_id': uuid.uuid4()}
        )
        self.assertEqual(list(decision.allowed), ['remarks'])
        self.assertEqual(decision.denied, ('approved_by_id',))

    def test_reviewer_may_write_every_field_on_any_activity(self):
        changes = {
            'is_blocked': True,
            'rejected_remarks': 'Wrong',
            'approved_by_id': self.reviewer.id,
            'status': 'review',
            'remarks': 'checked',
        }
        decision = authorize_activity_update(self.reviewer, activity(uuid.uuid4()), changes)
        self.assertEqual(decision.allowed, changes)

    def test_unknown_role_cannot_write(self):
        with self.assertRaises(ForbiddenActivityUpdate):
            authorize_activity_update(user('guest'), activity(), {'remarks': 'x'})
