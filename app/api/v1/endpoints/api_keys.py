import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.security import generate_api_key
from app.models.api_key import ApiKey
from app.schemas.api_key import ApiKeyCreate, ApiKeyCreated
from app.services.audit import audit
from app.services.auth import require_internal_admin


log = logging.getLogger(__name__)
router = APIRouter()

@router.post("/api-keys", response_model=ApiKeyCreated, status_code=201, dependencies=[Depends(require_internal_admin)])
async def create_api_key(payload: ApiKeyCreate, db: AsyncSession = Depends(get_db)) -> ApiKeyCreated:
    """
    Issue an operator key. Internal-only; the plain key is returned once.
    """
    new_key = generate_api_key()
    row = ApiKey(
        label=payload.label,
        key_prefix=new_key.prefix,
        key_hash=new_key.hashed,
        is_active=True,
        created_by="internal",
        updated_by="internal",
    )

    try:
        db.add(row)
        await db.flush()
        audit(db, actor_api_key_id="internal", action="api_key.created", target_type="api_key", target_id=row.id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log.exception("issue api key failed: integrity error")
        raise HTTPException(status_code=409, detail="Constraint violation")

    return ApiKeyCreated(id=row.id, label=row.label, plain_key=new_key.plain, key_prefix=new_key.prefix)
