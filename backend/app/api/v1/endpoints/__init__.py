# API endpoints
from . import auth, colleges, admins, tenure, public, college_admin

__all__ = ["auth", "colleges", "admins", "tenure", "public", "college_admin"]
