"""
Kanban stage transitions shared by the CRM and talent-bank boards.

Boards move freely: any stage can follow any other.  The only rule is that
moving a card onto the stage it already occupies does nothing at all.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)

MovedHook = Callable[[Any, str, str], None]


def move_entity(entity, from_stage: str, to_stage: str, *, field: str = 'stage',
                on_moved: Optional[MovedHook] = None):
    """Put ``entity`` on ``to_stage`` and persist only that column.

    ``from_stage`` is the stage the caller saw on its board.  When it no
    longer matches the stored value the move still happens and a warning is
    logged.  Persistence errors propagate unchanged.
    """
    if from_stage == to_stage:
        return entity
    current = getattr(entity, field)
    if current != from_stage:
        logger.warning('stale move of %s #%s: board says %r, stored %r',
                       type(entity).__name__, getattr(entity, 'pk', None), from_stage, current)
    setattr(entity, field, to_stage)
    update_fields = [field]
    if hasattr(entity, 'updated_at'):
        update_fields.append('updated_at')
    entity.save(update_fields=update_fields)
    logger.info('%s #%s moved %r -> %r', type(entity).__name__, getattr(entity, 'pk', None), from_stage, to_stage)
    if on_moved is not None:
        on_moved(entity, from_stage, to_stage)
    return entity


def broadcast_move(board: str, entity_id, from_stage: str, to_stage: str) -> None:
    """Tell open boards to refetch; consumers listen on ``pipeline.<board>``."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    event = {
        'type': 'pipeline.moved',
        'board': board,
        'id': entity_id,
        'from': from_stage,
        'to': to_stage,
        'ts': timezone.now().isoformat(),
    }
    async_to_sync(channel_layer.group_send)(f'pipeline.{board}', event)
