from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.services import PortalServices, build_services


async def get_services(db: AsyncSession = Depends(get_db)) -> PortalServices:
    """Services bound to the request's session"""
    return build_services(db)
