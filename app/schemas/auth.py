"""Auth API schemas."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for login. Users identify their firm by code (e.g. acme-cpa), not internal tenant_id."""

    tenant_code: str = Field(
        ...,
        min_length=1,
        description="Tenant code (firm slug) to identify the tenant",
    )
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
