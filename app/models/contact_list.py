from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from app.core.ids import gen_id
from app.models.base import Base, utcnow


class ContactList(Base):
    """
    One upload, split across the agent roster.

    Written once (header + all distributions in one transaction) and never
    updated in place. total_items is stored, not derived on read.
    """
    __tablename__ = "lists"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("lst"))

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_items: Mapped[int] = mapped_column(Integer, nullable=False)

    # Opaque uploader identity (ApiKey.id); never inspected here.
    uploaded_by: Mapped[str] = mapped_column(String, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )

    distributions: Mapped[list[ListDistribution]] = relationship(
        back_populates="contact_list",
        order_by="ListDistribution.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ListDistribution(Base):
    __tablename__ = "list_distributions"
    __table_args__ = (
        UniqueConstraint("list_id", "position", name="uq_list_distribution_position"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("lsd"))
    list_id: Mapped[str] = mapped_column(String, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False)

    # Roster order at upload time
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Plain reference (no FK): agents may be deleted later and the list must stay readable.
    agent_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    # [{"first_name": ..., "phone": ..., "notes": ...}, ...] in original row order
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    item_count: Mapped[int] = mapped_column(Integer, nullable=False)

    contact_list: Mapped[ContactList] = relationship(back_populates="distributions")
