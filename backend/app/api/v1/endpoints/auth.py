from fastapi import APIRouter, Depends, HTTPException, status, Request

from app.api.deps import get_services
from app.core.security import create_access_token
from app.core.logging_config import logger, set_admin_id
from app.modules.auth.dependencies import AdminPrincipal, get_current_principal
from app.schemas.admin import AdminResponse, PasswordChange
from app.schemas.auth import AdminLogin, Token
from app.services import PortalServices

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(
    request: Request,
    credentials: AdminLogin,
    services: PortalServices = Depends(get_services)
):
    """Admin login"""
    client_ip = request.client.host if request.client else "unknown"

    admin = await services.directory.find_by_email(credentials.email, include_inactive=True)

    if not admin or not await services.directory.verify_password(admin, credentials.password):
        logger.log_auth_event(
            event="login",
            success=False,
            admin_email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    if not admin.is_active:
        logger.log_auth_event(
            event="login",
            success=False,
            admin_email=credentials.email,
            reason="Account inactive",
            client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    await services.directory.update_last_login(admin)
    set_admin_id(admin.id)

    token_data = {
        "sub": admin.id,
        "email": admin.email,
        "role": admin.role.value
    }
    access_token = create_access_token(token_data)

    logger.log_auth_event(
        event="login",
        success=True,
        admin_email=admin.email,
        client_ip=client_ip,
        admin_role=admin.role.value
    )

    return Token(
        access_token=access_token,
        admin=await services.directory.describe(admin)
    )


@router.get("/me", response_model=AdminResponse)
async def get_me(
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    """Current admin with its active tenure"""
    return await services.directory.get_view(principal.admin_id)


@router.put("/me/password")
async def change_password(
    data: PasswordChange,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    admin = await services.directory.get(principal.admin_id)
    if not await services.directory.verify_password(admin, data.current_password):
        logger.log_auth_event(
            event="password_change",
            success=False,
            admin_email=admin.email,
            reason="Current password incorrect"
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    await services.directory.update_password(admin.id, data.new_password)
    logger.log_auth_event(event="password_change", success=True, admin_email=admin.email)
    return {"success": True, "message": "Password updated successfully"}
