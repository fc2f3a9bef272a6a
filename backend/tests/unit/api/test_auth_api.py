"""
Unit Tests for Authentication API Endpoints
"""
import pytest
from httpx import AsyncClient

from conftest import ADMIN_PASSWORD, auth_headers_for
from app.models.admin import AdminRole


class TestAdminLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, super_admin):
        response = await client.post('/api/v1/auth/login', json={
            'email': 'ROOT@campus.edu',
            'password': ADMIN_PASSWORD
        })

        assert response.status_code == 200
        data = response.json()
        assert data['token_type'] == 'bearer'
        assert data['access_token']
        assert data['admin']['role'] == 'super-admin'
        assert data['admin']['last_login'] is not None
        assert 'password_hash' not in data['admin']

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, super_admin):
        response = await client.post('/api/v1/auth/login', json={
            'email': 'root@campus.edu',
            'password': 'wrongpassword'
        })

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_inactive_admin(self, client: AsyncClient, services, make_admin):
        alice = await make_admin("Alice")
        email = alice.email
        await services.coordinator.deactivate_admin(alice.id)

        response = await client.post('/api/v1/auth/login', json={'email': email, 'password': ADMIN_PASSWORD})

        assert response.status_code == 403


class TestCurrentAdmin:

    @pytest.mark.asyncio
    async def test_me_includes_tenure(self, client: AsyncClient, services, college, make_admin):
        alice = await make_admin("Alice")
        await services.coordinator.assign(alice.id, college.id, 2024)

        response = await client.get('/api/v1/auth/me', headers=auth_headers_for(alice.id, AdminRole.COLLEGE_ADMIN))

        assert response.status_code == 200
        data = response.json()
        assert data['assigned_college']['code'] == 'REC'
        assert data['batch_year'] == 2024

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me')
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_me_rejects_bad_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer garbage'})

        assert response.status_code == 401
        assert response.json()['error']['code'] == 'AUTH_FAILED'

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient, super_admin, super_admin_headers):
        response = await client.put('/api/v1/auth/me/password', headers=super_admin_headers, json={
            'current_password': ADMIN_PASSWORD,
            'new_password': 'even-better-pass'
        })
        assert response.status_code == 200

        login = await client.post('/api/v1/auth/login', json={
            'email': 'root@campus.edu',
            'password': 'even-better-pass'
        })
        assert login.status_code == 200
