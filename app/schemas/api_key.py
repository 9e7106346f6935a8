from pydantic import BaseModel, Field


class ApiKeyCreate(BaseModel):
    label: str = Field(min_length=1, max_length=200)


class ApiKeyCreated(BaseModel):
    id: str
    label: str
    plain_key: str  # returned only once
    key_prefix: str
