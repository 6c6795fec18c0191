from pydantic import BaseModel, EmailStr, Field, field_validator


class RegistrationIn(BaseModel):
    name: str = Field(..., description="The name of the user", min_length=1, max_length=120)
    email: EmailStr = Field(..., description="The email of the user", max_length=255)
    password: str = Field(..., description="The password of the user", min_length=6, max_length=72)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ActivationIn(BaseModel):
    activation_token: str = Field(..., min_length=1)
    # any wrong code, whatever its length, is a CodeMismatch
    activation_code: str


class LoginIn(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=72)
