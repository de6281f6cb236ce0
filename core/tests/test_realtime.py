from types import SimpleNamespace

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator

from core.realtime import consumers
from core.realtime.consumers import PipelineConsumer


@pytest.fixture
def modules_of(monkeypatch, db):
    """Stub the permission lookup; users here are plain namespaces with a ``modules`` set."""
    monkeypatch.setattr(consumers, 'accessible_modules', lambda user: user.modules)


def member(*modules):
    return SimpleNamespace(is_authenticated=True, modules=set(modules))


def communicator(board, user):
    comm = WebsocketCommunicator(PipelineConsumer.as_asgi(), f"/ws/pipeline/{board}/")
    comm.scope['url_route'] = {'kwargs': {'board': board}}
    comm.scope['user'] = user
    return comm


async def _session(board, user):
    comm = communicator(board, user)
    connected, _ = await comm.connect()
    if not connected:
        return connected, []
    received = [await comm.receive_json_from()]
    await get_channel_layer().group_send(f"pipeline.{board}", {
        'type': 'pipeline.moved', 'board': board, 'id': 1, 'from': 'Novo', 'to': 'Triagem',
    })
    received.append(await comm.receive_json_from())
    await comm.disconnect()
    return connected, received


def test_authenticated_client_receives_moves(modules_of):
    connected, received = async_to_sync(_session)('talent-bank', member('talent-bank'))
    assert connected
    assert received[0] == {'type': 'welcome', 'board': 'talent-bank'}
    assert received[1]['to'] == 'Triagem'


def test_anonymous_or_unknown_board_is_refused(modules_of):
    assert async_to_sync(_session)('crm', None)[0] is False
    assert async_to_sync(_session)('ghost', member('crm-pipeline'))[0] is False


def test_board_needs_its_module(modules_of):
    assert async_to_sync(_session)('crm', member('crm-leads', 'prontuario'))[0] is False
    assert async_to_sync(_session)('crm', member('crm-leads', 'crm-pipeline'))[0] is True
