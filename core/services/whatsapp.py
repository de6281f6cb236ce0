import logging
import re
import secrets
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

from core.exceptions import BotUnavailable

logger = logging.getLogger(__name__)


@dataclass
class SentMessage:
    wa_msg_id: str
    wa_to: str


def digits(phone: Optional[str]) -> str:
    return re.sub(r'\D', '', phone or '')


def normalize_phone(phone: Optional[str]) -> str:
    """Digits with the Brazilian country code (and Rio area code for 8/9-digit locals)."""
    cleaned = digits(phone)
    if len(cleaned) in (12, 13) and cleaned.startswith('55'):
        return cleaned
    if len(cleaned) in (10, 11):
        return f"55{cleaned}"
    if len(cleaned) in (8, 9):
        return f"5521{cleaned}"
    return cleaned


def _masked(phone: str) -> str:
    return f"{phone[:4]}***{phone[-4:]}" if len(phone) > 8 else '***'


def send_message(to: str, body: str) -> SentMessage:
    """POST the message to the bot; raise ``BotUnavailable`` unless it accepts it."""
    if not settings.WHATSAPP_BOT_URL:
        raise BotUnavailable('Bot do WhatsApp não configurado')
    wa_to = normalize_phone(to)
    try:
        r = requests.post(
            f"{settings.WHATSAPP_BOT_URL}/send",
            json={'to': wa_to, 'message': body},
            headers={'Authorization': f"Bearer {settings.WHATSAPP_BOT_TOKEN}"},
            timeout=settings.WHATSAPP_BOT_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as e:
        logger.warning('whatsapp bot send to %s failed: %s', _masked(wa_to), e)
        raise BotUnavailable(f'Falha ao enviar mensagem: {e}')
    except ValueError:
        logger.warning('whatsapp bot returned a non-JSON body')
        raise BotUnavailable('Resposta inválida do bot')
    if not data.get('success'):
        logger.warning('whatsapp bot refused message to %s: %s', _masked(wa_to), data.get('error'))
        raise BotUnavailable(data.get('error') or 'Mensagem recusada pelo bot')
    logger.info('whatsapp message sent to %s', _masked(wa_to))
    return SentMessage(wa_msg_id=data.get('messageId') or '', wa_to=wa_to)


def token_is_valid(header: Optional[str]) -> bool:
    """Check an ``Authorization: Bearer <token>`` header against the bot token."""
    expected = settings.WHATSAPP_BOT_TOKEN
    if not expected or not header:
        return False
    scheme, _, token = header.partition(' ')
    return scheme.lower() == 'bearer' and secrets.compare_digest(token.strip(), expected)
