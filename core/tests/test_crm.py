import pytest
import requests
from django.urls import reverse

from core.models import Contact, Lead, LeadActivity, WhatsAppMessage
from core.services import crm, whatsapp

pytestmark = pytest.mark.django_db


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


@pytest.fixture
def bot(settings):
    settings.WHATSAPP_BOT_URL = 'http://bot.local'
    settings.WHATSAPP_BOT_TOKEN = 'sekret'
    return settings


@pytest.mark.parametrize('raw, expected', [
    ('(21) 99876-5432', '5521998765432'),
    ('998765432', '5521998765432'),
    ('+55 21 99876-5432', '5521998765432'),
    ('2133334444', '552133334444'),
    ('', ''),
])
def test_normalize_phone(raw, expected):
    assert whatsapp.normalize_phone(raw) == expected


def test_token_check(bot):
    assert whatsapp.token_is_valid('Bearer sekret')
    assert not whatsapp.token_is_valid('Bearer nope')
    assert not whatsapp.token_is_valid('Token sekret')
    assert not whatsapp.token_is_valid(None)


def test_create_lead_reuses_contact_by_phone(admin_client):
    payload = {'elderlyName': 'Dona Lúcia', 'source': 'Google',
               'contact': {'fullName': 'Pedro', 'phone': '(21) 99876-5432', 'lgpdConsent': True}}
    r1 = admin_client.post(reverse('crm_leads'), payload, format='json')
    assert r1.status_code == 201
    payload['contact']['phone'] = '21998765432'
    r2 = admin_client.post(reverse('crm_leads'), payload, format='json')
    assert r2.data['data']['contact']['id'] == r1.data['data']['contact']['id']
    assert Contact.objects.count() == 1
    assert Contact.objects.get().lgpd_consent_at is not None


def test_move_lead_and_board(admin_client):
    lead = Lead.objects.create(elderly_name='Seu João')
    r = admin_client.post(reverse('crm_lead_move', args=[lead.pk]),
                          {'fromStage': 'Novo', 'toStage': 'Visitou'}, format='json')
    assert r.status_code == 200
    lead.refresh_from_db()
    assert lead.stage == 'Visitou'

    board = admin_client.get(reverse('crm_pipeline')).data['data']
    assert [c['stage'] for c in board] == Lead.STAGES
    assert next(c for c in board if c['stage'] == 'Visitou')['count'] == 1


def test_move_to_unknown_stage_is_rejected(admin_client):
    lead = Lead.objects.create()
    r = admin_client.post(reverse('crm_lead_move', args=[lead.pk]),
                          {'fromStage': 'Novo', 'toStage': 'Sumiu'}, format='json')
    assert r.status_code == 400
    lead.refresh_from_db()
    assert lead.stage == 'Novo'


def test_activities_toggle(admin_client):
    lead = Lead.objects.create()
    r = admin_client.post(reverse('crm_lead_activities', args=[lead.pk]),
                          {'type': 'call', 'title': 'Ligar para a família'}, format='json')
    assert r.status_code == 201
    activity_id = r.data['data']['id']
    r = admin_client.post(reverse('crm_activity_toggle', args=[activity_id]))
    assert r.data['data']['done'] is True


def test_send_message_through_bot(admin_client, bot, monkeypatch):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers))
        return FakeResponse({'success': True, 'messageId': 'wamid.1'})

    monkeypatch.setattr(whatsapp.requests, 'post', fake_post)
    contact = Contact.objects.create(full_name='Pedro', phone='(21) 99876-5432')
    lead = Lead.objects.create(contact=contact)

    r = admin_client.post(reverse('crm_lead_messages', args=[lead.pk]), {'body': 'Olá!'}, format='json')
    assert r.status_code == 201
    assert calls[0][0] == 'http://bot.local/send'
    assert calls[0][1] == {'to': '5521998765432', 'message': 'Olá!'}
    assert calls[0][2]['Authorization'] == 'Bearer sekret'
    msg = WhatsAppMessage.objects.get()
    assert msg.direction == 'outbound' and msg.wa_msg_id == 'wamid.1'
    assert LeadActivity.objects.filter(lead=lead, type='msg', done=True).exists()


def test_bot_failure_stores_nothing(admin_client, bot, monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError('refused')

    monkeypatch.setattr(whatsapp.requests, 'post', fake_post)
    lead = Lead.objects.create(contact=Contact.objects.create(phone='21998765432'))
    r = admin_client.post(reverse('crm_lead_messages', args=[lead.pk]), {'body': 'Olá!'}, format='json')
    assert r.status_code == 502
    assert r.data['error']['code'] == 'bot_unavailable'
    assert not WhatsAppMessage.objects.exists()


def test_webhook_requires_bot_token(api, bot):
    payload = {'waFrom': '21998765432', 'body': 'Oi'}
    assert api.post(reverse('whatsapp_webhook'), payload, format='json').status_code == 401
    r = api.post(reverse('whatsapp_webhook'), payload, format='json', HTTP_AUTHORIZATION='Bearer sekret')
    assert r.status_code == 200


def test_inbound_message_creates_contact_and_lead_once():
    first = crm.receive_inbound({'waFrom': '(21) 99876-5432', 'body': 'Quero informações', 'notifyName': 'Pedro'})
    second = crm.receive_inbound({'waFrom': '5521998765432', 'body': 'Ainda estou aguardando'})
    assert first.lead_id == second.lead_id
    lead = Lead.objects.get()
    assert lead.source == 'WhatsApp'
    assert lead.contact.full_name == 'Pedro'
    assert lead.messages.filter(direction='inbound').count() == 2


def test_inbound_after_closed_lead_opens_new_one():
    first = crm.receive_inbound({'waFrom': '21998765432', 'body': 'Oi'})
    Lead.objects.filter(pk=first.lead_id).update(stage='Fechado')
    second = crm.receive_inbound({'waFrom': '21998765432', 'body': 'Oi de novo'})
    assert second.lead_id != first.lead_id
    assert Contact.objects.count() == 1


def test_report_conversion_rates(admin_client):
    for stage, n in (('Novo', 4), ('Visitou', 2), ('Proposta', 1), ('Fechado', 1), ('Perdido', 2)):
        for _ in range(n):
            Lead.objects.create(stage=stage, source='Google')
    data = admin_client.get(reverse('crm_reports'), {'days': 30}).data['data']
    conv = data['conversion']
    assert conv['totalLeads'] == 10
    assert conv['visited'] == 4
    assert conv['proposals'] == 2
    assert conv['visitRate'] == 40.0
    assert conv['proposalRate'] == 50.0
    assert conv['closeRate'] == 50.0
    assert data['periodSummary'] == {'newLeads': 4, 'closedDeals': 1, 'lostDeals': 2, 'inProgress': 7}
    assert data['topSources'] == [{'source': 'Google', 'count': 10}]
