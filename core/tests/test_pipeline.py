import logging
from unittest import mock

import pytest

from core.models import Lead
from core.services import pipeline
from core.services.crm import move_lead


def test_same_stage_touches_nothing():
    entity = mock.Mock(stage='Novo')
    hook = mock.Mock()
    assert pipeline.move_entity(entity, 'Novo', 'Novo', on_moved=hook) is entity
    entity.save.assert_not_called()
    hook.assert_not_called()


def test_move_saves_only_the_stage_column():
    entity = mock.Mock(spec=['stage', 'save', 'pk'], stage='Novo', pk=7)
    hook = mock.Mock()
    pipeline.move_entity(entity, 'Novo', 'Proposta', on_moved=hook)
    assert entity.stage == 'Proposta'
    entity.save.assert_called_once_with(update_fields=['stage'])
    hook.assert_called_once_with(entity, 'Novo', 'Proposta')


def test_custom_field_and_updated_at():
    entity = mock.Mock(spec=['status', 'updated_at', 'save', 'pk'], status='Novo', updated_at=None, pk=1)
    pipeline.move_entity(entity, 'Novo', 'Triagem', field='status')
    entity.save.assert_called_once_with(update_fields=['status', 'updated_at'])


def test_stale_move_proceeds_with_warning(caplog):
    entity = mock.Mock(spec=['stage', 'save', 'pk'], stage='Visitou', pk=3)
    with caplog.at_level(logging.WARNING, logger='core.services.pipeline'):
        pipeline.move_entity(entity, 'Novo', 'Proposta')
    assert entity.stage == 'Proposta'
    assert 'stale move' in caplog.text


def test_save_errors_propagate():
    entity = mock.Mock(spec=['stage', 'save', 'pk'], stage='Novo', pk=1)
    entity.save.side_effect = RuntimeError('db down')
    hook = mock.Mock()
    with pytest.raises(RuntimeError):
        pipeline.move_entity(entity, 'Novo', 'Proposta', on_moved=hook)
    hook.assert_not_called()


def test_broadcast_sends_to_board_group():
    layer = mock.Mock()
    layer.group_send = mock.AsyncMock()
    with mock.patch.object(pipeline, 'get_channel_layer', return_value=layer):
        pipeline.broadcast_move('crm', 5, 'Novo', 'Visitou')
    group, event = layer.group_send.call_args.args
    assert group == 'pipeline.crm'
    assert event['type'] == 'pipeline.moved'
    assert (event['id'], event['from'], event['to']) == (5, 'Novo', 'Visitou')


@pytest.mark.django_db
def test_lead_move_persists_and_broadcasts():
    lead = Lead.objects.create()
    with mock.patch('core.services.crm.broadcast_move') as broadcast:
        move_lead(lead, 'Novo', 'Qualificando')
    lead.refresh_from_db()
    assert lead.stage == 'Qualificando'
    broadcast.assert_called_once_with('crm', lead.pk, 'Novo', 'Qualificando')
