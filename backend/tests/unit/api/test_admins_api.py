"""
Unit Tests for Admin Management API Endpoints
"""
import pytest
from httpx import AsyncClient

from conftest import auth_headers_for
from app.models.admin import AdminRole


def admin_body(**overrides) -> dict:
    body = {
        'username': 'alice',
        'email': 'alice@campus.edu',
        'password': 'secret123',
        'full_name': 'Alice Kumar',
    }
    body.update(overrides)
    return body


class TestCreateAdmin:

    @pytest.mark.asyncio
    async def test_create_college_admin_with_tenure(self, client: AsyncClient, super_admin_headers, college):
        response = await client.post('/api/v1/admins', headers=super_admin_headers, json=admin_body(
            role='admin', college_id=college.id, batch_year='2024'
        ))

        assert response.status_code == 201
        data = response.json()
        assert data['role'] == 'admin'
        assert data['assigned_college']['code'] == 'REC'
        assert data['batch_year'] == 2024
        assert data['tenure']['is_active'] is True

    @pytest.mark.asyncio
    async def test_super_admin_with_college_rejected(self, client: AsyncClient, super_admin_headers, college):
        response = await client.post('/api/v1/admins', headers=super_admin_headers, json=admin_body(
            role='super-admin', college_id=college.id, batch_year=2024
        ))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_conflicting_batch_returns_409(self, client: AsyncClient, services, super_admin_headers, college, make_admin):
        holder = await make_admin("Holder")
        college_id = college.id
        await services.coordinator.assign(holder.id, college_id, 2024)

        response = await client.post('/api/v1/admins', headers=super_admin_headers, json=admin_body(
            role='admin', college_id=college_id, batch_year=2024
        ))

        assert response.status_code == 409
        assert response.json()['error']['code'] == 'BATCH_YEAR_CONFLICT'

    @pytest.mark.asyncio
    async def test_requires_super_admin(self, client: AsyncClient, make_admin):
        alice = await make_admin("Alice")

        response = await client.get('/api/v1/admins', headers=auth_headers_for(alice.id, AdminRole.COLLEGE_ADMIN))

        assert response.status_code == 403


class TestAdminQueries:

    @pytest.mark.asyncio
    async def test_list_filters_by_role(self, client: AsyncClient, super_admin_headers, make_admin):
        await make_admin("Alice")

        response = await client.get('/api/v1/admins', params={'role': 'admin'}, headers=super_admin_headers)

        assert response.status_code == 200
        assert [a['full_name'] for a in response.json()['admins']] == ['Alice']

    @pytest.mark.asyncio
    async def test_unassigned(self, client: AsyncClient, services, super_admin_headers, college, make_admin):
        alice = await make_admin("Alice")
        await make_admin("Bob")
        await services.coordinator.assign(alice.id, college.id, 2024)

        response = await client.get('/api/v1/admins/unassigned', headers=super_admin_headers)

        assert response.json()['count'] == 1
        assert response.json()['admins'][0]['full_name'] == 'Bob'

    @pytest.mark.asyncio
    async def test_update_and_deactivate(self, client: AsyncClient, services, super_admin_headers, college, make_admin):
        alice = await make_admin("Alice")
        alice_id = alice.id
        await services.coordinator.assign(alice_id, college.id, 2024)

        updated = await client.put(f'/api/v1/admins/{alice_id}', headers=super_admin_headers, json={'full_name': 'Alice K'})
        assert updated.json()['full_name'] == 'Alice K'

        removed = await client.delete(f'/api/v1/admins/{alice_id}', headers=super_admin_headers)
        assert removed.status_code == 200

        gone = await client.get(f'/api/v1/admins/{alice_id}', headers=super_admin_headers)
        assert gone.status_code == 404

        history = await client.get(f'/api/v1/admins/{alice_id}/history', headers=super_admin_headers)
        assert history.status_code == 200
        assert history.json()[0]['is_active'] is False

    @pytest.mark.asyncio
    async def test_colleges_headed(self, client: AsyncClient, services, super_admin_headers, college, other_college, make_admin):
        alice = await make_admin("Alice")
        await services.coordinator.assign(alice.id, college.id, 2024)
        await services.coordinator.assign(alice.id, other_college.id, 2024)

        response = await client.get(f'/api/v1/admins/{alice.id}/colleges', headers=super_admin_headers)

        assert sorted(c['code'] for c in response.json()) == ['PES', 'REC']
