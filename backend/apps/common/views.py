import time
import uuid

from django.core.cache import caches
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')

PROBE_KEY_PREFIX = 'health:probe:'


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _db_check(alias='default'):
    started = time.perf_counter()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute('SELECT 1')
        latency = _elapsed_ms(started)
        logger.debug('Database probe succeeded', alias=alias, latency_ms=latency)
        return {'status': 'ok', 'latency_ms': latency}
    except OperationalError as exc:
        logger.warning('Database probe hit operational error', alias=alias, error=str(exc))
        return {'status': 'fail', 'error': str(exc)}
    except Exception as exc:
        logger.exception('Database probe failed unexpectedly', alias=alias)
        return {'status': 'fail', 'error': str(exc), 'exception': exc.__class__.__name__}


def _cache_check(alias='default'):
    """Round-trip a throwaway key through the configured cache backend.

    django-redis is configured to swallow connection errors, so a dead Redis
    shows up here as a value that never comes back rather than as an exception.
    """
    started = time.perf_counter()
    key = f'{PROBE_KEY_PREFIX}{uuid.uuid4().hex}'
    try:
        cache = caches[alias]
        cache.set(key, '1', timeout=5)
        value = cache.get(key)
        cache.delete(key)
    except Exception as exc:
        logger.exception('Cache probe failed unexpectedly', alias=alias)
        return {'status': 'fail', 'error': str(exc), 'exception': exc.__class__.__name__}
    if value != '1':
        logger.warning('Cache probe could not read back its key', alias=alias)
        return {'status': 'fail', 'error': 'cache round-trip failed'}
    latency = _elapsed_ms(started)
    logger.debug('Cache probe succeeded', alias=alias, latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    logger.debug('Liveness probe served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: verifies the database and the cache."""
    checks = {
        'database': _db_check(),
        'cache': _cache_check(),
    }
    failing = [name for name, result in checks.items() if result.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(
        {'status': overall_status, 'checks': checks},
        status=200 if not failing else 503,
    )
