from fastapi import APIRouter
from app.api.v1.endpoints import auth, colleges, admins, tenure, public, college_admin

api_router = APIRouter()


# Simple health check endpoint for load balancer
@api_router.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "service": "campus-portal-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(colleges.router, prefix="/colleges", tags=["Colleges"])
api_router.include_router(admins.router, prefix="/admins", tags=["Admins"])
api_router.include_router(tenure.router, prefix="/tenure", tags=["Tenure"])
api_router.include_router(public.router, prefix="/public", tags=["Public"])
api_router.include_router(college_admin.router, prefix="/college-admin", tags=["College Admin"])
