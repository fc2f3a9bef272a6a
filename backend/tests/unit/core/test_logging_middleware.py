"""
Unit Tests for request logging middleware and structured log output
"""
import json
import logging

import pytest
from httpx import AsyncClient

from app.core.logging_config import JSONFormatter, set_admin_id, set_request_id, logger


class TestRequestMiddleware:

    @pytest.mark.asyncio
    async def test_echoes_request_id(self, client: AsyncClient):
        response = await client.get('/api/v1/health', headers={'X-Request-ID': 'abc12345'})

        assert response.headers['X-Request-ID'] == 'abc12345'
        assert response.headers['X-Response-Time'].endswith('ms')

    @pytest.mark.asyncio
    async def test_generates_request_id_and_security_headers(self, client: AsyncClient):
        response = await client.get('/health')

        assert len(response.headers['X-Request-ID']) == 8
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'


class TestJSONFormatter:

    def test_includes_context_and_extras(self):
        set_request_id('req-1')
        set_admin_id('admin-1')
        try:
            record = logger.makeRecord(
                'campus_portal', logging.INFO, __file__, 1, 'Tenure assigned', (), None,
                extra={'tenure_batch_year': 2025}
            )
            payload = json.loads(JSONFormatter().format(record))
        finally:
            set_request_id('')
            set_admin_id('')

        assert payload['message'] == 'Tenure assigned'
        assert payload['request_id'] == 'req-1'
        assert payload['admin_id'] == 'admin-1'
        assert payload['tenure_batch_year'] == 2025

    def test_tenure_rejection_logs_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger='campus_portal'):
            logger.log_tenure_event('assign rejected', 'a1', 'c1', 2024, reason='BATCH_YEAR_CONFLICT')

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.tenure_event == 'assign rejected'
        assert record.reason == 'BATCH_YEAR_CONFLICT'
