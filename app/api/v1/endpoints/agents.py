import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.agent import Agent
from app.schemas.agent import AgentCreate, AgentOut, AgentUpdate, Mobile
from app.services.audit import audit
from app.services.auth import Actor, get_actor


log = logging.getLogger(__name__)
router = APIRouter()


def _agent_out(agent: Agent) -> AgentOut:
    return AgentOut(
        id=agent.id,
        name=agent.name,
        email=agent.email,
        mobile=Mobile(country_code=agent.mobile_country_code, number=agent.mobile_number),
        is_active=agent.is_active,
        created_at=agent.created_at,
    )


async def _get_agent_or_404(db: AsyncSession, agent_id: str) -> Agent:
    agent = (await db.execute(select(Agent).where(Agent.id == agent_id))).scalar_one_or_none()
    if not agent:
        raise HTTPException(status_code=404, detail="Agent not found")
    return agent


@router.post("/agents", response_model=AgentOut, status_code=201)
async def create_agent(
    payload: AgentCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> AgentOut:
    email = str(payload.email).lower()
    existing = (await db.execute(select(Agent).where(Agent.email == email))).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="Agent with this email already exists")

    agent = Agent(
        name=payload.name.strip(),
        email=email,
        mobile_country_code=payload.mobile.country_code,
        mobile_number=payload.mobile.number,
        created_by=actor.api_key_id,
        updated_by=actor.api_key_id,
    )
    try:
        db.add(agent)
        await db.flush()
        audit(db, actor_api_key_id=actor.api_key_id, action="agent.created", target_type="agent", target_id=agent.id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log.exception("create agent failed: integrity error")
        raise HTTPException(status_code=409, detail="Agent with this email already exists")

    return _agent_out(agent)


@router.get("/agents", response_model=list[AgentOut])
async def list_agents(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[AgentOut]:
    stmt = select(Agent).order_by(Agent.created_at.desc(), Agent.id.desc())
    agents = (await db.execute(stmt)).scalars().all()
    return [_agent_out(a) for a in agents]


@router.get("/agents/{agent_id}", response_model=AgentOut)
async def get_agent(
    agent_id: str,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> AgentOut:
    return _agent_out(await _get_agent_or_404(db, agent_id))


@router.patch("/agents/{agent_id}", response_model=AgentOut)
async def update_agent(
    agent_id: str,
    payload: AgentUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> AgentOut:
    agent = await _get_agent_or_404(db, agent_id)

    changed: list[str] = []
    if payload.name is not None:
        agent.name = payload.name.strip()
        changed.append("name")
    if payload.email is not None:
        agent.email = str(payload.email).lower()
        changed.append("email")
    if payload.mobile is not None:
        agent.mobile_country_code = payload.mobile.country_code
        agent.mobile_number = payload.mobile.number
        changed.append("mobile")
    if payload.is_active is not None:
        agent.is_active = payload.is_active
        changed.append("is_active")
    agent.updated_by = actor.api_key_id

    try:
        audit(
            db,
            actor_api_key_id=actor.api_key_id,
            action="agent.updated",
            target_type="agent",
            target_id=agent.id,
            detail={"fields": changed},
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log.exception("update agent failed: integrity error")
        raise HTTPException(status_code=409, detail="Agent with this email already exists")

    return _agent_out(agent)


@router.delete("/agents/{agent_id}", status_code=204)
async def delete_agent(
    agent_id: str,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> Response:
    # Lists keep referencing the agent id; readers render it as a missing agent.
    agent = await _get_agent_or_404(db, agent_id)
    await db.delete(agent)
    audit(db, actor_api_key_id=actor.api_key_id, action="agent.deleted", target_type="agent", target_id=agent_id)
    await db.commit()
    return Response(status_code=204)
