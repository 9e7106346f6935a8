from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.schemas.contact_list import ListDetailOut, ListSummaryOut, ListUploadOut
from app.services.auth import Actor, get_actor
from app.services.list_errors import ListIngestError
from app.services.list_ingest import ingest_list
from app.services.list_reader import get_list_detail, list_detail_from_row, list_summaries
from app.services.record_parser import source_format_for_filename

router = APIRouter()


async def _read_capped(upload: UploadFile, max_bytes: int) -> bytes:
    payload = await upload.read(max_bytes + 1)
    if len(payload) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File exceeds {max_bytes} bytes")
    return payload


@router.post("/lists/upload", response_model=ListUploadOut, status_code=201)
async def upload_list(
    file: UploadFile | None = File(default=None),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ListUploadOut:
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        file_name = Path(file.filename or "").name
        try:
            source_format = source_format_for_filename(file_name)
        except ListIngestError as e:
            raise HTTPException(status_code=e.status_code, detail=e.detail)

        payload = await _read_capped(file, settings.upload_max_bytes)
    finally:
        # Nothing of the upload outlives the request.
        await file.close()

    try:
        result = await ingest_list(
            db=db,
            payload=payload,
            source_format=source_format,
            file_name=file_name,
            uploaded_by=actor.api_key_id,
            agent_limit=settings.distribution_agent_limit,
        )
    except ListIngestError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    # Built from the committed rows and the roster already in hand: no read after commit.
    detail = list_detail_from_row(result.contact_list, {a.id: a for a in result.agents})
    return ListUploadOut(message="File uploaded and distributed successfully", list=detail)


@router.get("/lists", response_model=list[ListSummaryOut])
async def get_lists(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[ListSummaryOut]:
    try:
        return await list_summaries(db)
    except ListIngestError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/lists/{list_id}", response_model=ListDetailOut)
async def get_list(
    list_id: str,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ListDetailOut:
    try:
        return await get_list_detail(db, list_id)
    except ListIngestError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
