import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse

from ..modules import get_registry

logger = logging.getLogger(__name__)


def healthz(request):
    """Liveness check: database round-trip plus the size of the module table."""
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except DatabaseError as e:
        logger.error('healthz database check failed: %s', e)
        return JsonResponse({'ok': False, 'error': str(e)}, status=503)
    return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1), 'modules': len(get_registry())})
