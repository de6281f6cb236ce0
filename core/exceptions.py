import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ModuleRequiredError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Módulo obrigatório não pode ser removido.'
    default_code = 'module_required'


class RemovalNeedsConfirmation(APIException):
    """Removing a module would also disable modules that depend on it."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A remoção afeta outros módulos e precisa de confirmação.'
    default_code = 'removal_needs_confirmation'

    def __init__(self, plan, detail=None):
        super().__init__(detail or self.default_detail)
        self.plan = plan


class RecordLocked(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Registro assinado e bloqueado para edição.'
    default_code = 'record_locked'


class BotUnavailable(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Bot do WhatsApp indisponível.'
    default_code = 'bot_unavailable'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view'), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', None) or 'api_error'
    error = {'code': code, 'message': detail}
    plan = getattr(exc, 'plan', None)
    if plan is not None:
        error['plan'] = plan.as_dict()
    headers = {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if resp.has_header(k)}
    return Response({'ok': False, 'error': error}, status=resp.status_code, headers=headers)
