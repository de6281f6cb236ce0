from datetime import timedelta
from types import SimpleNamespace

import pytest
from django.urls import reverse
from django.utils import timezone

from core.models import Guest, MedicalRecord
from core.services import prontuario

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('position, specialty', [
    ('Médico', 'Medicina'),
    ('Enfermeira Chefe', 'Enfermagem'),
    ('Técnico de Enfermagem', 'Técnico de Enfermagem'),
    ('Fisioterapeuta', 'Fisioterapia'),
    ('Fonoaudióloga', 'Fonoaudiologia'),
    ('Psicóloga', 'Psicologia'),
    ('Nutricionista', 'Nutrição'),
    ('Assistente Social', 'Serviço Social'),
    ('Cuidador', 'Técnico de Enfermagem'),
    ('', 'Técnico de Enfermagem'),
])
def test_position_maps_to_specialty(position, specialty):
    assert prontuario.specialty_for_position(position) == specialty


def test_administrator_writes_everything_and_everyone_reads_everything():
    admin = SimpleNamespace(position='Administrador')
    nurse = SimpleNamespace(position='Enfermeira')
    assert prontuario.permissions_for(admin)['canWrite'] == prontuario.SPECIALTIES
    perms = prontuario.permissions_for(nurse)
    assert perms['canRead'] == prontuario.SPECIALTIES
    assert perms['canWrite'] == ['Enfermagem']


@pytest.fixture
def guest():
    return Guest.objects.create(full_name='Maria', unit='Botafogo')


@pytest.fixture
def nurse(make_user):
    return make_user('nurse', position='Enfermeira', first_name='Clara', cpf='123.456.789-00',
                     modules=['prontuario'])


@pytest.fixture
def nurse_client(api, nurse):
    api.force_authenticate(user=nurse)
    return api


def test_create_record_in_own_specialty(nurse_client, guest):
    r = nurse_client.post(reverse('guest_records', args=[guest.pk]),
                          {'specialty': 'Enfermagem', 'content': {'pa': '12x8'}}, format='json')
    assert r.status_code == 201
    assert r.data['data']['professionalName'] == 'Clara'
    assert r.data['data']['recordDate'] == timezone.localdate().isoformat()


def test_cannot_write_other_specialty(nurse_client, guest):
    r = nurse_client.post(reverse('guest_records', args=[guest.pk]), {'specialty': 'Medicina'}, format='json')
    assert r.status_code == 403
    assert not MedicalRecord.objects.exists()


def test_only_author_edits_todays_unlocked_record(nurse_client, nurse, guest, make_user, api):
    record = prontuario.create_record(guest, nurse, {'specialty': 'Enfermagem', 'content': {'a': 1}})
    url = reverse('record_detail', args=[record.pk])
    assert nurse_client.put(url, {'content': {'a': 2}}, format='json').status_code == 200

    other = make_user('nurse2', position='Enfermeira', modules=['prontuario'])
    nurse_client.force_authenticate(user=other)
    assert nurse_client.put(url, {'content': {'a': 3}}, format='json').status_code == 403

    nurse_client.force_authenticate(user=nurse)
    MedicalRecord.objects.filter(pk=record.pk).update(record_date=timezone.localdate() - timedelta(days=1))
    assert nurse_client.put(url, {'content': {'a': 4}}, format='json').status_code == 403


def test_signing_locks_and_hash_verifies(nurse_client, nurse, guest):
    record = prontuario.create_record(guest, nurse, {'specialty': 'Enfermagem', 'content': {'obs': 'estável'}})
    r = nurse_client.post(reverse('record_sign', args=[record.pk]), {'signerRegistry': 'COREN 1234'}, format='json')
    assert r.status_code == 200
    sig = r.data['data']['signature']
    assert r.data['data']['isLocked'] is True
    assert len(sig['hash']) == 64
    assert sig['signerCpf'] == '123.456.789-00'

    detail = nurse_client.get(reverse('record_detail', args=[record.pk])).data['data']
    assert detail['signatureValid'] is True

    r = nurse_client.put(reverse('record_detail', args=[record.pk]), {'content': {}}, format='json')
    assert r.status_code == 409
    assert r.data['error']['code'] == 'record_locked'
    assert nurse_client.post(reverse('record_sign', args=[record.pk]), {}, format='json').status_code == 409


def test_tampered_record_fails_verification(nurse, guest):
    record = prontuario.create_record(guest, nurse, {'specialty': 'Enfermagem', 'content': {'obs': 'ok'}})
    prontuario.sign_record(record, nurse, {})
    record.content = {'obs': 'alterado'}
    assert prontuario.verify_signature(record) is False


def test_filters_and_summary(nurse_client, nurse, guest, make_user):
    physio = make_user('physio', position='Fisioterapeuta', first_name='Paulo', modules=['prontuario'])
    prontuario.create_record(guest, nurse, {'specialty': 'Enfermagem', 'shift': 'SN'})
    prontuario.create_record(guest, physio, {'specialty': 'Fisioterapia'})

    r = nurse_client.get(reverse('guest_records', args=[guest.pk]), {'specialty': 'Fisioterapia'})
    assert [x['professionalName'] for x in r.data['data']] == ['Paulo']

    summary = nurse_client.get(reverse('guest_records_summary', args=[guest.pk])).data['data']
    assert summary['total'] == 2
    assert summary['byShift'] == {'SN': 1, 'SD': 1}
    assert summary['bySpecialty'] == {'Enfermagem': 1, 'Fisioterapia': 1}


def test_permissions_endpoint(nurse_client):
    data = nurse_client.get(reverse('record_permissions')).data['data']
    assert data['specialty'] == 'Enfermagem'
    assert data['canWrite'] == ['Enfermagem']
