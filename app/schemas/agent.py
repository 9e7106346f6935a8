from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class Mobile(BaseModel):
    country_code: str = Field(min_length=1, max_length=8)
    number: str = Field(min_length=4, max_length=32, pattern=r"^\+?[0-9][0-9 \-]*$")


class AgentCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    mobile: Mobile


class AgentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=200)
    email: EmailStr | None = None
    mobile: Mobile | None = None
    is_active: bool | None = None


class AgentOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    mobile: Mobile
    is_active: bool
    created_at: datetime
