from django.db import connection, DatabaseError
from django.http import JsonResponse
import logging

logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe that also pings the database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        database = 'connected'
    except DatabaseError:
        logger.exception('Health check could not reach the database')
        database = 'disconnected'

    status_code = 200 if database == 'connected' else 503
    return JsonResponse({
        'status': 'healthy' if status_code == 200 else 'degraded',
        'database': database,
    }, status=status_code)


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Não encontrado',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Erro interno do servidor',
        'status': 500
    }, status=500)
