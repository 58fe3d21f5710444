from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError


class RegisterRequest(BaseModel):
    """
    Request body for the register endpoint.
    """

    first_name: str = Field(..., min_length=2, max_length=50, examples=["John"])
    last_name: str = Field(..., min_length=2, max_length=50, examples=["Smith"])
    email: EmailStr = Field(..., examples=["john@example.com"])
    password: str = Field(
        ..., min_length=6, examples=["StrongPassword123!"], description="Password"
    )
    confirm_password: str = Field(..., description="Must match password")

    @field_validator("first_name", "last_name", mode="before")
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    def normalize_email(cls, v):
        return v.lower()

    @model_validator(mode="after")
    def check_passwords_match(self):
        if self.password != self.confirm_password:
            raise PydanticCustomError("password_mismatch", "Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """
    Request body for the login endpoint.
    """

    email: str = Field(..., examples=["john@example.com"], description="Account email")
    password: str = Field(
        ..., examples=["StrongPassword123!"], description="User's password"
    )


class TokenResponse(BaseModel):
    """
    Response model containing both access and refresh tokens.
    """

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field("bearer", description="Type of token")
