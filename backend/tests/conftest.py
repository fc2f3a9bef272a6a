"""
Campus Portal - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = ''

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.models.admin import Admin, AdminRole
from app.models.college import College
from app.schemas.admin import SuperAdminCreate
from app.schemas.college import CollegeCreate, ContactInfo
from app.services import PortalServices, build_services

fake = Faker()

ADMIN_PASSWORD = 'adminpassword123'


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database for each test"""
    engine = create_async_engine(
        'sqlite+aiosqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def services(db_session: AsyncSession) -> PortalServices:
    return build_services(db_session)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


def college_payload(code: str = None, name: str = None) -> CollegeCreate:
    return CollegeCreate(
        name=name or f"{fake.last_name()} Engineering College {fake.random_int(1, 99999)}",
        code=code or fake.lexify('????').upper(),
        location=fake.city(),
        address=fake.street_address(),
        contact_info=ContactInfo(email=fake.email(), phone='9876543210'),
    )


@pytest.fixture
async def college(services: PortalServices) -> College:
    """Active college with code REC"""
    return await services.colleges.create(college_payload(code='REC', name='Rajalakshmi Engineering College'))


@pytest.fixture
async def other_college(services: PortalServices) -> College:
    """Second active college with code PES"""
    return await services.colleges.create(college_payload(code='PES', name='PES University'))


@pytest.fixture
def make_admin(services: PortalServices, db_session: AsyncSession):
    """Factory for committed college admins without any tenure"""
    async def _make(full_name: str = None, role: AdminRole = AdminRole.COLLEGE_ADMIN) -> Admin:
        admin = await services.directory.create(
            username=fake.unique.user_name()[:16],
            email=fake.unique.email(),
            password=ADMIN_PASSWORD,
            full_name=full_name or fake.name(),
            role=role,
        )
        await db_session.commit()
        return admin
    return _make


@pytest.fixture
async def super_admin(services: PortalServices) -> Admin:
    return await services.coordinator.register_admin(SuperAdminCreate(
        role='super-admin',
        username='root',
        email='root@campus.edu',
        password=ADMIN_PASSWORD,
        full_name='Portal Root',
    ))


def auth_headers_for(admin_id: str, role: AdminRole) -> dict:
    token = create_access_token({'sub': admin_id, 'role': role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def super_admin_headers(super_admin: Admin) -> dict:
    """Generate authentication headers for the super admin"""
    return auth_headers_for(super_admin.id, AdminRole.SUPER_ADMIN)
