from datetime import date, timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from core.models import Employee, ScheduleSubstitution, SobreavisoEmployee, WorkSchedule
from core.services import employees as employee_svc
from core.services import schedules

pytestmark = pytest.mark.django_db


@pytest.fixture
def manager_client(api, make_user):
    manager = make_user('rh', role='admin', modules=['employees', 'schedules', 'sobreaviso'])
    api.force_authenticate(user=manager)
    return api


@pytest.fixture
def scheduler_client(api, make_user):
    nurse = make_user('escala', position='Enfermeira', modules=['schedules'])
    api.force_authenticate(user=nurse)
    return api


@pytest.fixture
def nurses():
    return [
        Employee.objects.create(full_name='Ana', position='Enfermeira', unit='Botafogo'),
        Employee.objects.create(full_name='Bia', position='Técnico de Enfermagem', unit='Botafogo'),
        Employee.objects.create(full_name='Caio', position='Cozinheira', unit='Botafogo'),
        Employee.objects.create(full_name='Duda', position='Enfermeira', unit='Tijuca'),
        Employee.objects.create(full_name='Edu', position='Enfermeira', unit='Botafogo', status='Inativo'),
    ]


def roster(**extra):
    return {'scheduleType': 'Enfermagem', 'unit': 'Botafogo', 'month': 2, 'year': 2025, **extra}


# ---------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------
def test_create_employee_with_license_and_exams(manager_client):
    payload = {
        'fullName': 'Clara Souza', 'position': 'Enfermeira', 'unit': 'Tijuca',
        'professionalLicense': {'council': 'COREN', 'licenseNumber': '123456', 'expiryDate': '2026-01-10'},
        'medicalExams': [{'type': 'ASO', 'result': 'Apto', 'examDate': '2025-01-10', 'expiryDate': '2026-01-10'}],
    }
    r = manager_client.post(reverse('employees'), payload, format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['professionalLicense'] == {'council': 'COREN', 'licenseNumber': '123456', 'expiryDate': '2026-01-10'}
    assert data['medicalExams'][0]['expiryDate'] == '2026-01-10'
    assert data['status'] == 'Ativo'


def test_license_number_required_when_council_given(manager_client):
    payload = {'fullName': 'X', 'position': 'Enfermeira', 'unit': 'Tijuca',
               'professionalLicense': {'council': 'COREN'}}
    r = manager_client.post(reverse('employees'), payload, format='json')
    assert r.status_code == 400
    assert not Employee.objects.exists()


def test_inactive_employee_needs_exit_date(manager_client, nurses):
    url = reverse('employee_detail', args=[nurses[0].pk])
    assert manager_client.patch(url, {'status': 'Inativo'}, format='json').status_code == 400
    r = manager_client.patch(url, {'status': 'Inativo', 'exitDate': '2025-03-01'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['exitDate'] == '2025-03-01'


def test_employee_list_filters(manager_client, nurses):
    r = manager_client.get(reverse('employees'), {'unit': 'Botafogo', 'status': 'Ativo'})
    assert [e['fullName'] for e in r.data['data']] == ['Ana', 'Bia', 'Caio']


def test_expiring_items_window_and_order():
    today = date(2025, 5, 1)
    Employee.objects.create(
        full_name='Ana', position='Enfermeira', unit='Botafogo',
        license_council='COREN', license_number='99', license_expiry_date=today + timedelta(days=3),
        medical_exams=[{'type': 'ASO', 'result': 'Apto', 'expiryDate': (today + timedelta(days=20)).isoformat()}],
        general_vaccines=[{'type': 'Influenza', 'expiryDate': (today + timedelta(days=31)).isoformat()}],
        covid_vaccines=[{'dose': 'Reforço', 'vaccineType': 'Pfizer', 'expiryDate': today.isoformat()}],
    )
    Employee.objects.create(
        full_name='Bia', position='Cozinheira', unit='Tijuca',
        general_vaccines=[{'type': 'Tétano', 'expiryDate': (today - timedelta(days=1)).isoformat()}],
    )
    items = employee_svc.expiring_items(today=today)
    assert [(i['type'], i['daysUntilExpiry']) for i in items] == [
        ('Vacina', 0), ('Carteira Profissional', 3), ('Exame', 20),
    ]
    assert items[0]['description'] == 'COVID Reforço - Pfizer'
    assert items[1]['description'] == 'COREN - 99'


def test_expiring_endpoint(manager_client):
    soon = timezone.localdate() + timedelta(days=5)
    Employee.objects.create(full_name='Ana', position='Enfermeira', unit='Botafogo',
                            license_council='COREN', license_number='1', license_expiry_date=soon)
    r = manager_client.get(reverse('employees_expiring'))
    assert r.status_code == 200
    assert r.data['data'][0]['daysUntilExpiry'] == 5


def test_staff_scheduler_cannot_open_employee_registry(scheduler_client, nurses):
    assert scheduler_client.get(reverse('employees')).status_code == 403
    assert scheduler_client.delete(reverse('employee_detail', args=[nurses[0].pk])).status_code == 403
    assert Employee.objects.filter(pk=nurses[0].pk).exists()


# ---------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------
def test_roster_employees_by_schedule_type(scheduler_client, nurses):
    url = reverse('schedule_employees')
    r = scheduler_client.get(url, {'scheduleType': 'Enfermagem', 'unit': 'Botafogo'})
    assert [e['name'] for e in r.data['data']] == ['Ana', 'Bia']
    r = scheduler_client.get(url, {'scheduleType': 'Nutrição', 'unit': 'Botafogo'})
    assert [e['name'] for e in r.data['data']] == ['Caio']
    r = scheduler_client.get(url, {'scheduleType': 'Geral', 'unit': 'Botafogo'})
    assert [e['name'] for e in r.data['data']] == ['Ana', 'Bia', 'Caio']


def test_set_and_clear_a_shift(scheduler_client, nurses):
    url = reverse('schedule_day')
    r = scheduler_client.put(url, roster(employeeId=nurses[0].pk, day=3, shift='12'), format='json')
    assert r.status_code == 200
    assert r.data['data']['days']['3'] == '12'
    assert len(r.data['data']['days']) == 28

    scheduler_client.put(url, roster(employeeId=nurses[0].pk, day=4, shift='DR'), format='json')
    r = scheduler_client.put(url, roster(employeeId=nurses[0].pk, day=3, shift=None), format='json')
    assert r.data['data']['days']['3'] is None
    assert WorkSchedule.objects.get().days == {'4': 'DR'}


def test_day_outside_month_is_rejected(scheduler_client, nurses):
    r = scheduler_client.put(reverse('schedule_day'), roster(employeeId=nurses[0].pk, day=30, shift='SD'),
                             format='json')
    assert r.status_code == 400
    assert not WorkSchedule.objects.exists()


def test_unknown_shift_code_is_rejected(scheduler_client, nurses):
    r = scheduler_client.put(reverse('schedule_day'), roster(employeeId=nurses[0].pk, day=3, shift='48'),
                             format='json')
    assert r.status_code == 400


def test_substitution_is_replaced_on_same_day(scheduler_client, nurses):
    url = reverse('schedule_substitutions')
    r = scheduler_client.post(url, roster(employeeId=nurses[0].pk, day=5, substituteName='Fabi', reason='Atestado'),
                              format='json')
    assert r.status_code == 201
    r = scheduler_client.post(url, roster(employeeId=nurses[0].pk, day=5, substituteId=nurses[1].pk), format='json')
    assert r.status_code == 201
    sub = ScheduleSubstitution.objects.get()
    assert sub.substitute_name == 'Bia'


def test_substitution_needs_a_substitute(scheduler_client, nurses):
    r = scheduler_client.post(reverse('schedule_substitutions'), roster(employeeId=nurses[0].pk, day=5),
                              format='json')
    assert r.status_code == 400


def test_remove_substitution(scheduler_client, nurses):
    ScheduleSubstitution.objects.create(employee=nurses[0], schedule_type='Enfermagem', unit='Botafogo',
                                        month=2, year=2025, day=5, substitute_name='Fabi')
    r = scheduler_client.delete(reverse('schedule_substitutions') + '?' + '&'.join(
        f'{k}={v}' for k, v in roster(employeeId=nurses[0].pk, day=5).items()))
    assert r.status_code == 200
    assert r.data['data']['deleted'] == 1
    assert not ScheduleSubstitution.objects.exists()


def test_month_view_and_clear(scheduler_client, nurses):
    schedules.set_shift(nurses[0], 'Enfermagem', 'Botafogo', 2, 2025, 1, 'SD')
    schedules.set_shift(nurses[0], 'Enfermagem', 'Tijuca', 2, 2025, 1, 'SD')
    ScheduleSubstitution.objects.create(employee=nurses[0], schedule_type='Enfermagem', unit='Botafogo',
                                        month=2, year=2025, day=1, substitute_name='Fabi')
    r = scheduler_client.get(reverse('schedules'), roster())
    assert r.data['data']['daysInMonth'] == 28
    assert len(r.data['data']['schedules']) == 1
    assert len(r.data['data']['substitutions']) == 1

    r = scheduler_client.delete(reverse('schedules') + '?scheduleType=Enfermagem&unit=Botafogo&month=2&year=2025')
    assert r.data['data'] == {'schedules': 1, 'substitutions': 1}
    assert WorkSchedule.objects.filter(unit='Tijuca').exists()
    assert not ScheduleSubstitution.objects.exists()


def test_monthly_report_counts(nurses):
    ana, bia = nurses[0], nurses[1]
    for day, shift in ((1, 'SD'), (2, 'DR'), (3, '12'), (4, '24')):
        schedules.set_shift(ana, 'Enfermagem', 'Botafogo', 2, 2025, day, shift)
    schedules.set_shift(bia, 'Enfermagem', 'Botafogo', 2, 2025, 1, '6h')
    for day in (2, 3):
        ScheduleSubstitution.objects.create(employee=ana, schedule_type='Enfermagem', unit='Botafogo',
                                            month=2, year=2025, day=day, substitute_name='Fabi')

    rows = schedules.monthly_report('Enfermagem', 'Botafogo', 2, 2025)
    by_name = {r['employeeName']: r for r in rows}
    assert by_name['Ana']['totalShifts'] == 4
    assert by_name['Ana']['shiftBreakdown'] == {'SD': 1, 'DR': 1, '12': 1, '24': 1, '6h': 0}
    # day 2 is a rest day, so only day 3 counts as substituted
    assert by_name['Ana']['substitutions'] == 1
    assert by_name['Ana']['actualDaysWorked'] == 2
    assert by_name['Bia']['actualDaysWorked'] == 1
    assert rows[-1]['employeeName'] == 'Fabi (CURINGA)'
    assert rows[-1]['actualDaysWorked'] == 2
    assert [r['employeeName'] for r in rows[:2]] == ['Ana', 'Bia']


def test_schedules_need_the_module(api, make_user):
    api.force_authenticate(user=make_user('semescala'))
    assert api.get(reverse('schedule_employees'), {'scheduleType': 'Geral', 'unit': 'Tijuca'}).status_code == 403


# ---------------------------------------------------------------------
# Sobreaviso
# ---------------------------------------------------------------------
def test_sobreaviso_crud_and_unit_filter(manager_client):
    url = reverse('sobreaviso')
    for name, unit, status in (('Ana', 'Botafogo', 'Ativo'), ('Bia', 'Ambas', 'Ativo'),
                               ('Caio', 'Tijuca', 'Ativo'), ('Duda', 'Botafogo', 'Inativo')):
        r = manager_client.post(url, {'fullName': name, 'position': 'Enfermeira', 'phone': '21999990000',
                                      'unit': unit, 'status': status}, format='json')
        assert r.status_code == 201

    r = manager_client.get(url, {'unit': 'Botafogo'})
    assert [e['fullName'] for e in r.data['data']] == ['Ana', 'Bia']

    caio = SobreavisoEmployee.objects.get(full_name='Caio')
    r = manager_client.patch(reverse('sobreaviso_detail', args=[caio.pk]), {'unit': 'Ambas'}, format='json')
    assert r.data['data']['unit'] == 'Ambas'
    assert manager_client.delete(reverse('sobreaviso_detail', args=[caio.pk])).status_code == 204


def test_sobreaviso_rejects_unknown_unit(manager_client):
    r = manager_client.post(reverse('sobreaviso'), {'fullName': 'X', 'position': 'Y', 'phone': '1',
                                                    'unit': 'Leblon'}, format='json')
    assert r.status_code == 400
