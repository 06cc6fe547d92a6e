import json
import unittest
from unittest import mock

from django.test import TestCase

from apps.common import views


class HealthViewsUnitTests(unittest.TestCase):
    def test_live_health_returns_alive_payload(self):
        response = views.live_health(None)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content)['status'], 'alive')

    @mock.patch('apps.common.views._cache_check', return_value={'status': 'ok', 'latency_ms': 0.4})
    @mock.patch('apps.common.views._db_check', return_value={'status': 'ok', 'latency_ms': 1.23})
    def test_ready_health_ok_when_dependencies_pass(self, mock_db_check, mock_cache_check):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 200)
        payload = json.loads(response.content)
        self.assertEqual(payload['status'], 'ok')
        self.assertEqual(payload['checks']['database'], mock_db_check.return_value)
        self.assertEqual(payload['checks']['cache'], mock_cache_check.return_value)

    @mock.patch('apps.common.views._cache_check', return_value={'status': 'ok'})
    @mock.patch('apps.common.views._db_check', return_value={'status': 'fail', 'error': 'db down'})
    def test_ready_health_degraded_on_database_failure(self, _mock_db_check, _mock_cache_check):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 503)
        self.assertEqual(json.loads(response.content)['status'], 'degraded')

    def test_cache_check_reports_failure_when_value_not_read_back(self):
        fake_cache = mock.Mock()
        fake_cache.get.return_value = None
        with mock.patch('apps.common.views.caches', {'default': fake_cache}):
            result = views._cache_check()
        self.assertEqual(result['status'], 'fail')
        fake_cache.set.assert_called_once()


class HealthEndpointTests(TestCase):
    def test_ready_endpoint_against_test_database_and_locmem_cache(self):
        response = self.client.get('/health/ready')
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload['checks']['database']['status'], 'ok')
        self.assertEqual(payload['checks']['cache']['status'], 'ok')
