from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.contact_list import ContactList, ListDistribution
from app.schemas.contact_list import (
    DistributionAgentOut,
    DistributionDetailOut,
    DistributionSummaryOut,
    ListDetailOut,
    ListItemOut,
    ListSummaryOut,
)
from app.services.agent_directory import get_agents_by_ids
from app.services.list_errors import ListNotFoundError, StoreError


log = logging.getLogger(__name__)


def _agent_out(agent: Agent | None) -> DistributionAgentOut | None:
    if agent is None:
        return None
    return DistributionAgentOut(id=agent.id, name=agent.name, email=agent.email)


def _summary(row: ContactList, agents: dict[str, Agent]) -> ListSummaryOut:
    return ListSummaryOut(
        id=row.id,
        file_name=row.file_name,
        total_items=row.total_items,
        uploaded_by=row.uploaded_by,
        distributions=[
            DistributionSummaryOut(
                agent_id=d.agent_id,
                agent=_agent_out(agents.get(d.agent_id)),
                item_count=d.item_count,
            )
            for d in row.distributions
        ],
        created_at=row.created_at,
    )


def list_detail_from_row(row: ContactList, agents: dict[str, Agent]) -> ListDetailOut:
    """Detail view of an already-loaded list; `agents` maps agent id -> Agent."""
    return ListDetailOut(
        id=row.id,
        file_name=row.file_name,
        total_items=row.total_items,
        uploaded_by=row.uploaded_by,
        distributions=[_distribution_detail(d, agents) for d in row.distributions],
        created_at=row.created_at,
    )


def _distribution_detail(d: ListDistribution, agents: dict[str, Agent]) -> DistributionDetailOut:
    return DistributionDetailOut(
        agent_id=d.agent_id,
        agent=_agent_out(agents.get(d.agent_id)),
        item_count=d.item_count,
        items=[ListItemOut(**item) for item in (d.items or [])],
    )


async def list_summaries(db: AsyncSession) -> list[ListSummaryOut]:
    """All lists, newest first, without per-record items."""
    try:
        stmt = select(ContactList).order_by(ContactList.created_at.desc(), ContactList.id.desc())
        rows = (await db.execute(stmt)).scalars().all()
        agent_ids = {d.agent_id for row in rows for d in row.distributions}
        agents = await get_agents_by_ids(db, agent_ids)
    except SQLAlchemyError as e:
        log.exception("list summaries read failed")
        raise StoreError("Error reading lists") from e

    return [_summary(row, agents) for row in rows]


async def get_list_detail(db: AsyncSession, list_id: str) -> ListDetailOut:
    """
    One list with every distribution's items.
    Agents deleted since the upload come back as agent=None.
    """
    try:
        row = (await db.execute(select(ContactList).where(ContactList.id == list_id))).scalar_one_or_none()
        if row is not None:
            agents = await get_agents_by_ids(db, {d.agent_id for d in row.distributions})
    except SQLAlchemyError as e:
        log.exception("list detail read failed: list_id=%s", list_id)
        raise StoreError("Error reading list") from e

    if row is None:
        raise ListNotFoundError("List not found")
    return list_detail_from_row(row, agents)
