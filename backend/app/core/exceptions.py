"""
Custom Exceptions for Campus Portal
===================================

Use these instead of generic Exception to:
1. Make errors more specific and debuggable
2. Enable proper error handling at API layer
3. Provide meaningful error messages to users

Usage:
    from app.core.exceptions import AdminNotFoundError, BatchYearConflictError

    if not admin:
        raise AdminNotFoundError(admin_id)

    try:
        await coordinator.assign(admin_id, college_id, batch_year)
    except BatchYearConflictError as e:
        logger.warning(f"Assignment rejected: {e}")
        raise
"""

from typing import Optional, Any, Dict, List


class PortalError(Exception):
    """Base exception for all Campus Portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(PortalError):
    """Admin authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(PortalError):
    """Admin not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(PortalError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class AdminNotFoundError(ResourceNotFoundError):
    """Admin not found or inactive"""

    def __init__(self, admin_id: str):
        super().__init__("Admin", admin_id)


class CollegeNotFoundError(ResourceNotFoundError):
    """College not found or inactive"""

    def __init__(self, college_id: str):
        super().__init__("College", college_id)


class MemberNotFoundError(ResourceNotFoundError):
    """Member not found"""

    def __init__(self, member_id: str):
        super().__init__("Member", member_id)


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(PortalError):
    """Operation conflicts with existing state"""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class BatchYearConflictError(ConflictError):
    """Another admin already holds the active tenure for this college and batch year"""

    def __init__(self, college_id: str, batch_year: int, college_name: Optional[str] = None,
                 holder_admin_id: Optional[str] = None):
        where = college_name or f"college '{college_id}'"
        super().__init__(
            f"Batch year {batch_year} already has an admin assigned to {where}",
            code="BATCH_YEAR_CONFLICT",
            details={"college_id": college_id, "batch_year": batch_year}
        )
        if holder_admin_id:
            self.details["holder_admin_id"] = holder_admin_id


class AdminAlreadyAssignedError(ConflictError):
    """Admin already holds a different active tenure that could not be ended"""

    def __init__(self, admin_id: str):
        super().__init__(
            f"Admin '{admin_id}' already holds an active tenure",
            code="ADMIN_ALREADY_ASSIGNED",
            details={"admin_id": admin_id}
        )


class ActiveTenureHeadsError(ConflictError):
    """College cannot be removed while someone actively governs it"""

    def __init__(self, college_id: str, head_names: List[str]):
        names = ", ".join(head_names)
        super().__init__(
            f"Cannot delete college with active tenure heads: {names}. End their tenure first.",
            code="ACTIVE_TENURE_HEADS",
            details={"college_id": college_id, "active_heads": head_names}
        )


class DuplicateResourceError(ConflictError):
    """A unique field is already taken"""

    def __init__(self, resource_type: str, field: str, value: str):
        super().__init__(
            f"{resource_type} with {field} '{value}' already exists",
            code="DUPLICATE_RESOURCE",
            details={"resource_type": resource_type, "field": field, "value": value}
        )


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(PortalError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class RoleAssignmentError(ValidationError):
    """Role does not allow the requested college/batch binding"""

    def __init__(self, message: str, role: Optional[str] = None):
        super().__init__(message)
        self.code = "INVALID_ROLE_ASSIGNMENT"
        if role:
            self.details["role"] = role


# ============================================
# Storage Errors
# ============================================

class StorageError(PortalError):
    """Persistence operation failed"""

    status_code = 503

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, code="STORAGE_ERROR")
        if operation:
            self.details["operation"] = operation


class OperationTimeoutError(StorageError):
    """Operation exceeded its deadline and was rolled back"""

    status_code = 504

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(f"{operation} timed out after {timeout_seconds}s", operation=operation)
        self.code = "OPERATION_TIMEOUT"
        self.details["timeout_seconds"] = timeout_seconds


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: PortalError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
