from pydantic import BaseModel


class MeOut(BaseModel):
    api_key_id: str
    label: str
