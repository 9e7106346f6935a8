from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent


async def find_active_agents(db: AsyncSession, limit: int) -> list[Agent]:
    """
    Roster for a distribution: the first `limit` active agents by creation order.
    Ordering is stable across calls so a given roster splits deterministically.
    """
    if limit <= 0:
        return []
    stmt = (
        select(Agent)
        .where(Agent.is_active.is_(True))
        .order_by(Agent.created_at.asc(), Agent.id.asc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_agents_by_ids(db: AsyncSession, agent_ids: set[str]) -> dict[str, Agent]:
    if not agent_ids:
        return {}
    rows = (await db.execute(select(Agent).where(Agent.id.in_(agent_ids)))).scalars().all()
    return {a.id: a for a in rows}
