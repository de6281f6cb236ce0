"""
Guest registry tests: filters, the exit rule and input sanitising.
"""
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Guest, User
from ..services.permissions import set_user_modules


class GuestAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='admin1', password='P@ssw0rd1', role='admin',
                                              position='Administrador')
        set_user_modules(self.admin, ['guests', 'prontuario'])
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def payload(self, **extra):
        data = {'fullName': 'Maria da Silva', 'unit': 'Botafogo', 'gender': 'Feminino',
                'birthDate': '1940-03-12', 'dependencyLevel': 'II'}
        data.update(extra)
        return data

    def test_create_and_filter_by_unit(self):
        r = self.client.post(reverse('guests'), self.payload(
            vaccines=[{'name': 'Influenza', 'date': '2024-04-01'}]), format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['status'], 'Ativo')
        self.assertEqual(r.data['data']['vaccines'][0]['date'], '2024-04-01')

        self.client.post(reverse('guests'), self.payload(fullName='José Souza', unit='Tijuca'), format='json')
        r = self.client.get(reverse('guests'), {'unit': 'Tijuca'})
        self.assertEqual([g['fullName'] for g in r.data['data']], ['José Souza'])

    def test_inactive_guest_needs_exit_date_and_reason(self):
        r = self.client.post(reverse('guests'), self.payload(status='Inativo'), format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Guest.objects.exists())

    def test_partial_update_checks_exit_rule_against_stored_values(self):
        guest = Guest.objects.create(full_name='Ana', unit='Botafogo')
        url = reverse('guest_detail', args=[guest.pk])

        r = self.client.patch(url, {'status': 'Inativo', 'exitDate': '2024-05-01'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

        r = self.client.patch(url, {'status': 'Inativo', 'exitDate': '2024-05-01', 'exitReason': 'Óbito'},
                              format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        guest.refresh_from_db()
        self.assertEqual(guest.status, 'Inativo')
        self.assertEqual(guest.exit_reason, 'Óbito')

    def test_names_are_sanitised(self):
        r = self.client.post(reverse('guests'), self.payload(fullName='<b>Maria</b><script>x</script>'),
                             format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('<', r.data['data']['fullName'])

    def test_dashboard_counts_follow_enabled_modules(self):
        Guest.objects.create(full_name='Ana', unit='Botafogo')
        self.assertEqual(self.client.get(reverse('dashboard')).data['data']['activeGuests'], 1)

        staff = User.objects.create_user(username='staff1', password='P@ssw0rd1')
        self.client.force_authenticate(user=staff)
        data = self.client.get(reverse('dashboard')).data['data']
        self.assertNotIn('activeGuests', data)
        self.assertNotIn('openLeads', data)
