"""
Seed the first Super Admin

Nobody can create admins over the API until a super admin exists, so this
creates one (or resets its password if the email is already registered).

Credentials come from the environment:
- SUPER_ADMIN_EMAIL     (default: admin@campus.edu)
- SUPER_ADMIN_USERNAME  (default: superadmin)
- SUPER_ADMIN_PASSWORD  (required)
- SUPER_ADMIN_NAME      (default: Super Admin)

Run with: python seed_super_admin.py
"""
import asyncio
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session_local, init_db, close_db
from app.core.security import get_password_hash
from app.models.admin import Admin, AdminRole
from app.schemas.admin import SuperAdminCreate
from app.services import build_services


async def ensure_super_admin(db: AsyncSession, email: str, username: str,
                             password: str, full_name: str) -> Admin:
    """Create the super admin, or reactivate it and reset its password"""
    services = build_services(db)
    existing = await services.directory.find_by_email(email, include_inactive=True)

    if existing is None:
        return await services.coordinator.register_admin(SuperAdminCreate(
            role=AdminRole.SUPER_ADMIN.value,
            username=username,
            email=email,
            password=password,
            full_name=full_name,
        ))

    if existing.role != AdminRole.SUPER_ADMIN:
        raise RuntimeError(f"{email} belongs to a college admin, refusing to promote it")

    existing.is_active = True
    existing.password_hash = get_password_hash(password)
    await db.commit()
    return existing


async def seed_super_admin():
    password = os.environ.get("SUPER_ADMIN_PASSWORD")
    if not password:
        print("SUPER_ADMIN_PASSWORD is not set")
        sys.exit(1)

    email = os.environ.get("SUPER_ADMIN_EMAIL", "admin@campus.edu")

    print("=" * 50)
    print("Seeding Super Admin...")
    print("=" * 50)

    await init_db()

    async with get_session_local()() as db:
        admin = await ensure_super_admin(
            db,
            email=email,
            username=os.environ.get("SUPER_ADMIN_USERNAME", "superadmin"),
            password=password,
            full_name=os.environ.get("SUPER_ADMIN_NAME", "Super Admin"),
        )
        print(f"  Ready: {admin.email} ({admin.role.value})")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_super_admin())
