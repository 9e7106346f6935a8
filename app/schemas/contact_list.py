from datetime import datetime

from pydantic import BaseModel, Field


class ListItemOut(BaseModel):
    first_name: str
    phone: str
    notes: str = ""


class DistributionAgentOut(BaseModel):
    id: str
    name: str
    email: str


class DistributionSummaryOut(BaseModel):
    agent_id: str
    # None when the agent was deleted after the upload
    agent: DistributionAgentOut | None
    item_count: int


class DistributionDetailOut(DistributionSummaryOut):
    items: list[ListItemOut] = Field(default_factory=list)


class ListSummaryOut(BaseModel):
    id: str
    file_name: str
    total_items: int
    uploaded_by: str
    distributions: list[DistributionSummaryOut]
    created_at: datetime


class ListDetailOut(ListSummaryOut):
    distributions: list[DistributionDetailOut]


class ListUploadOut(BaseModel):
    message: str
    list: ListDetailOut
