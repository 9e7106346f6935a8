from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import generate_api_key
from app.models.agent import Agent
from app.models.api_key import ApiKey


async def make_agents(db: AsyncSession, count: int, *, active: bool = True, start: int = 0) -> list[Agent]:
    """Agents with strictly increasing created_at so roster order is known."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    agents = []
    for i in range(start, start + count):
        agents.append(Agent(
            name=f"Agent {i}",
            email=f"agent{i}@test.com",
            mobile_country_code="+1",
            mobile_number=f"555000{i:04d}",
            is_active=active,
            created_at=base + timedelta(minutes=i),
            created_by="test",
            updated_by="test",
        ))
    db.add_all(agents)
    await db.commit()
    return agents


@pytest.fixture
async def seed_operator(db_session):
    key = generate_api_key()
    row = ApiKey(
        label="Operator Test",
        key_prefix=key.prefix,
        key_hash=key.hashed,
        is_active=True,
        created_by="test",
        updated_by="test",
    )
    db_session.add(row)
    await db_session.commit()

    return {
        "api_key_id": row.id,
        "plain_key": key.plain,
        "headers": {"X-API-Key": key.plain},
    }


@pytest.fixture
async def seed_agents(db_session):
    return await make_agents(db_session, 3)
