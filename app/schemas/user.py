from pydantic import BaseModel, EmailStr, Field

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)

class VerifyRequest(BaseModel):
    token: str = Field(..., min_length=1)

class TokenPairResponse(BaseModel):
    token: str
    refresh_token: str

class VerifyResponse(BaseModel):
    valid: bool
    email: str

class UserStatisticsResponse(BaseModel):
    total: int

class UserDetailResponse(BaseModel):
    email: str

    class Config:
        from_attributes = True

class UserUpdate(BaseModel):
    email: EmailStr

class PasswordResetRequest(BaseModel):
    username: str = Field(..., min_length=1)

class NewPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)
