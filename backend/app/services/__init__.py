from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.tenure_ledger import TenureLedger
from app.services.admin_directory import AdminDirectory
from app.services.college_registry import CollegeRegistry
from app.services.assignment_coordinator import AssignmentCoordinator
from app.services.batch_validation import BatchValidationGateway
from app.services.member_registrar import MemberRegistrar


@dataclass
class PortalServices:
    """All services for one unit of work, sharing a single session"""
    db: AsyncSession
    ledger: TenureLedger
    directory: AdminDirectory
    colleges: CollegeRegistry
    coordinator: AssignmentCoordinator
    gateway: BatchValidationGateway
    members: MemberRegistrar


def build_services(db: AsyncSession) -> PortalServices:
    ledger = TenureLedger(db)
    directory = AdminDirectory(db, ledger)
    gateway = BatchValidationGateway(db, ledger)
    return PortalServices(
        db=db,
        ledger=ledger,
        directory=directory,
        colleges=CollegeRegistry(db, ledger),
        coordinator=AssignmentCoordinator(db, ledger, directory),
        gateway=gateway,
        members=MemberRegistrar(db, gateway),
    )


__all__ = [
    "TenureLedger",
    "AdminDirectory",
    "CollegeRegistry",
    "AssignmentCoordinator",
    "BatchValidationGateway",
    "MemberRegistrar",
    "PortalServices",
    "build_services",
]
