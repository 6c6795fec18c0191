from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserOut(CamelModel):
    id: str = Field(..., description="The id of the user")
    name: str
    email: str = Field(..., description="The email of the user")
    role: str = "user"
    is_verified: bool = False
    avatar: Optional[dict[str, str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SuccessOut(CamelModel):
    success: Literal[True] = True
    message: str


class RegistrationOut(SuccessOut):
    activation_token: str


class LoginOut(CamelModel):
    success: Literal[True] = True
    access_token: str
    user: UserOut


class RefreshOut(CamelModel):
    success: Literal[True] = True
    access_token: str


class MeOut(CamelModel):
    success: Literal[True] = True
    user: UserOut


class ErrorOut(BaseModel):
    success: Literal[False] = False
    message: str
