from pydantic import BaseModel, EmailStr

from app.schemas.admin import AdminResponse


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminResponse
