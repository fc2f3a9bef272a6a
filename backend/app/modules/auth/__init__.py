# Authentication module

from app.modules.auth.dependencies import (
    AdminPrincipal,
    get_current_principal,
    require_super_admin,
    get_governed_tenure,
)

__all__ = [
    "AdminPrincipal",
    "get_current_principal",
    "require_super_admin",
    "get_governed_tenure",
]
