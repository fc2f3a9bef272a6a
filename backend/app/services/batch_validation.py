"""
Batch validation for member self-registration.

Answers "does an admin currently govern batch Y at college C?" and who it is.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging_config import logger
from app.core.types import coerce_batch_year
from app.models.admin import Admin
from app.models.college import College
from app.schemas.tenure import BatchValidationResult
from app.services.tenure_ledger import TenureLedger


class BatchValidationGateway:

    def __init__(self, db: AsyncSession, ledger: TenureLedger):
        self.db = db
        self.ledger = ledger

    async def validate(self, college_id: str, batch_year) -> BatchValidationResult:
        """
        Invalid input and unknown colleges come back as valid=False.
        Storage failures are not caught here.
        """
        try:
            year = coerce_batch_year(batch_year)
        except ValueError:
            return BatchValidationResult(valid=False, error=f"Invalid batch year: {batch_year}")

        college = await self.db.get(College, college_id)
        if college is None or not college.is_active:
            return BatchValidationResult(valid=False, error="College not found")

        for record in await self.ledger.find_all_active_by_college(college_id):
            if record.batch_year == year:
                admin = await self.db.get(Admin, record.admin_id)
                return BatchValidationResult(valid=True, admin_name=admin.full_name if admin else None)

        logger.debug(f"[BatchValidation] No head for {college.code}/{year}")
        return BatchValidationResult(
            valid=False,
            error=f"No active admin found for batch year {year} at this college"
        )


def get_batch_validation_gateway(db: AsyncSession) -> BatchValidationGateway:
    return BatchValidationGateway(db, TenureLedger(db))
