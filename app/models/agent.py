from app.core.ids import gen_id
from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, AuditMixin


class Agent(AuditMixin, Base):
    __tablename__ = "agents"
    __table_args__ = (
        # roster lookup: active agents in creation order
        Index("ix_agents_active_created", "is_active", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("agt"))

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    mobile_country_code: Mapped[str] = mapped_column(String(8), nullable=False)
    mobile_number: Mapped[str] = mapped_column(String(32), nullable=False)

    # Only active agents are considered when an upload is distributed.
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
