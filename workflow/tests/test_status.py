from datetime import datetime, timezone

from django.test import SimpleTestCase

from workflow.status import (
    ActivityStatus,
    HouseStatus,
    compute_progress,
    derive_house_status,
    derive_status,
    first_transition_stamps,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
EARLIER = datetime(2025, 2, 1, 9, 0, tzinfo=timezone.utc)


def state(**values):
    current = {
        'is_blocked': False,
        'rejected_remarks': None,
        'completion_date': None,
        'approved_by_id': None,
        'start_date': None,
    }
    current.update(values)
    return current


class DeriveStatusTests(SimpleTestCase):
    def test_untouched_activity_is_pending(self):
        self.assertEqual(derive_status(state()), ActivityStatus.PENDING)

    def test_start_date_means_in_progress(self):
        self.assertEqual(derive_status(state(start_date=EARLIER)), ActivityStatus.IN_PROGRESS)

    def test_completion_without_approval_is_review(self):
        self.assertEqual(
            derive_status(state(start_date=EARLIER, completion_date=NOW)),
            ActivityStatus.REVIEW,
        )

    def test_completion_with_approval_is_completed(self):
        self.assertEqual(
            derive_status(state(completion_date=NOW, approved_by_id='reviewer')),
            ActivityStatus.COMPLETED,
        )

    def test_approval_alone_does_not_complete(self):
        self.assertEqual(derive_status(state(approved_by_id='reviewer')), ActivityStatus.PENDING)

    def test_blocked_wins_over_everything(self):
        current = state(
            completion_date=NOW,
            approved_by_id='reviewer',
            rejected_remarks='redo',
        )
        self.assertEqual(derive_status(current, {'is_blocked': True}), ActivityStatus.BLOCKED)

    def test_rejected_wins_over_completion(self):
        current = state(completion_date=NOW, approved_by_id='reviewer')
        self.assertEqual(
            derive_status(current, {'rejected_remarks': 'Wrong finish'}),
            ActivityStatus.REJECTED,
        )

    def test_blank_rejected_remarks_are_ignored(self):
        current = state(start_date=EARLIER)
        self.assertEqual(
            derive_status(current, {'rejected_remarks': '   '}),
            ActivityStatus.IN_PROGRESS,
        )

    def test_null_in_changes_clears_stored_value(self):
        current = state(is_blocked=True, start_date=EARLIER)
        self.assertEqual(derive_status(current, {'is_blocked': False}), ActivityStatus.IN_PROGRESS)
        current = state(completion_date=NOW, approved_by_id='reviewer')
        self.assertEqual(derive_status(current, {'approved_by_id': None}), ActivityStatus.REVIEW)

    def test_absent_keys_keep_stored_values(self):
        current = state(completion_date=NOW, approved_by_id='reviewer')
        self.assertEqual(derive_status(current, {'remarks': 'ok'}), ActivityStatus.COMPLETED)

    def test_result_is_always_a_known_status(self):
        combos = [
            state(),
            state(is_blocked=True),
            state(rejected_remarks='x'),
            state(completion_date=NOW),
            state(completion_date=NOW, approved_by_id='r'),
            state(start_date=EARLIER),
        ]
        for current in combos:
            self.assertIn(derive_status(current), ActivityStatus.values)


class FirstTransitionStampTests(SimpleTestCase):
    def test_review_stamps_missing_start_date(self):
        stamps = first_transition_stamps(state(), {'completion_date': NOW}, ActivityStatus.REVIEW, NOW)
        self.assertEqual(stamps, {'start_date': NOW})

    def test_existing_start_date_is_kept(self):
        stamps = first_transition_stamps(
            state(start_date=EARLIER), {'completion_date': NOW}, ActivityStatus.REVIEW, NOW
        )
        self.assertEqual(stamps, {})

    def test_derived_pending_never_stamps(self):
        self.assertEqual(first_transition_stamps(state(), {}, ActivityStatus.PENDING, NOW), {})

    def test_explicit_pending_stamps_start_date(self):
        stamps = first_transition_stamps(state(), {}, ActivityStatus.PENDING, NOW, explicit=True)
        self.assertEqual(stamps, {'start_date': NOW})

    def test_completed_stamps_missing_completion_date(self):
        stamps = first_transition_stamps(
            state(start_date=EARLIER), {}, ActivityStatus.COMPLETED, NOW, explicit=True
        )
        self.assertEqual(stamps, {'completion_date': NOW})

    def test_supplied_values_win(self):
        stamps = first_transition_stamps(
            state(), {'start_date': None, 'completion_date': EARLIER}, ActivityStatus.REVIEW, NOW
        )
        self.assertEqual(stamps, {})


class ProgressTests(SimpleTestCase):
    def test_progress_formula(self):
        self.assertAlmostEqual(compute_progress(1, 3), 100 / 3)
        self.assertEqual(compute_progress(3, 3), 100)

    def test_zero_total_is_zero_progress(self):
        self.assertEqual(compute_progress(0, 0), 0)

    def test_all_done_completes_house(self):
        self.assertEqual(derive_house_status(HouseStatus.IN_PROGRESS, 3, 3), HouseStatus.COMPLETED)
        self.assertEqual(derive_house_status(HouseStatus.DELAYED, 3, 3), HouseStatus.COMPLETED)

    def test_regression_reopens_completed_house(self):
        self.assertEqual(derive_house_status(HouseStatus.COMPLETED, 2, 3), HouseStatus.IN_PROGRESS)

    def test_other_statuses_are_kept(self):
        self.assertEqual(derive_house_status(HouseStatus.DELAYED, 1, 3), HouseStatus.DELAYED)

    def test_house_without_activities_is_never_completed(self):
        self.assertEqual(derive_house_status(HouseStatus.IN_PROGRESS, 0, 0), HouseStatus.IN_PROGRESS)
