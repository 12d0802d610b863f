from django.test import TestCase
from rest_framework.test import APIClient

from activities.models import Activity
from authentication.models import Role
from houses.services import create_house
from workflow.tests.factories import make_templates, make_user


class ActivityTemplateApiTests(TestCase):
    def setUp(self):
        self.templates = make_templates(2)
        self.reviewer = make_user('reviewer@example.com', role=Role.REVIEWER)
        self.admin = make_user('admin@example.com', role=Role.ADMIN)
        self.surveyor = make_user('surveyor@example.com')
        self.client = APIClient()

    def payload(self, **overrides):
        data = {
            'num': 30,
            'phase': 'Acabados',
            'subPhase': 'Pintura',
            'activity': 'Pintura exterior',
            'dependance': [1, 2],
        }
        data.update(overrides)
        return data

    def test_list_filters_active(self):
        Activity.objects.filter(pk=self.templates[0].pk).update(is_active=False)
        self.client.force_authenticate(self.surveyor)
        response = self.client.get('/api/activities/', {'isActive': 'true'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([a['num'] for a in response.json()['activities']], [2])

    def test_reviewer_creates_template(self):
        self.client.force_authenticate(self.reviewer)
        response = self.client.post('/api/activities/', self.payload(), format='json')
        self.assertEqual(response.status_code, 201, response.content)
        body = response.json()['activity']
        self.assertEqual(body['subPhase'], 'Pintura')
        self.assertTrue(body['isActive'])

    def test_surveyor_cannot_create(self):
        self.client.force_authenticate(self.surveyor)
        response = self.client.post('/api/activities/', self.payload(), format='json')
        self.assertEqual(response.status_code, 403)

    def test_missing_fields(self):
        self.client.force_authenticate(self.reviewer)
        response = self.client.post('/api/activities/', {'num': 40}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_duplicate_num_is_a_conflict(self):
        self.client.force_authenticate(self.reviewer)
        response = self.client.post('/api/activities/', self.payload(num=1), format='json')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['error'], 'Activity number 1 already exists')

    def test_update_keeps_own_num(self):
        self.client.force_authenticate(self.reviewer)
        response = self.client.put(
            f'/api/activities/{self.templates[0].pk}/',
            {'num': 1, 'isActive': False},
            format='json',
        )
        self.assertEqual(response.status_code, 200, response.content)
        self.assertFalse(response.json()['activity']['isActive'])

    def test_delete_refused_while_referenced(self):
        create_house({'name': 'Lote 1'})
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/activities/{self.templates[0].pk}/')
        self.assertEqual(response.status_code, 400)
        self.assertTrue(Activity.objects.filter(pk=self.templates[0].pk).exists())

    def test_admin_deletes_unused_template(self):
        self.client.force_authenticate(self.reviewer)
        self.assertEqual(self.client.delete(f'/api/activities/{self.templates[0].pk}/').status_code, 403)

        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/activities/{self.templates[0].pk}/')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Activity.objects.filter(pk=self.templates[0].pk).exists())
