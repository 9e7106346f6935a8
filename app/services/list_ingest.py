from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.contact_list import ContactList
from app.services.agent_directory import find_active_agents
from app.services.distributor import distribute
from app.services.list_errors import ListIngestError, NoAgentsError, NoValidRecordsError, StoreError
from app.services.list_persister import persist_list
from app.services.record_filter import filter_valid_records
from app.services.record_parser import SourceFormat, parse_records


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    contact_list: ContactList
    # roster the list was split across, in distribution order
    agents: list[Agent]


async def ingest_list(
    *,
    db: AsyncSession,
    payload: bytes,
    source_format: SourceFormat,
    file_name: str,
    uploaded_by: str,
    agent_limit: int,
) -> IngestResult:
    """
    Parse -> filter -> distribute -> persist, end to end.

    Every check runs before anything is written: a ParseError,
    NoValidRecordsError or NoAgentsError leaves the store untouched.
    `agent_limit` caps the roster (first N active agents).
    """
    try:
        candidates = parse_records(payload, source_format)
        records = filter_valid_records(candidates)
        if not records:
            raise NoValidRecordsError(
                "No valid data found in file. Please ensure the file has FirstName and Phone columns."
            )

        try:
            agents = await find_active_agents(db, agent_limit)
        except SQLAlchemyError as e:
            log.exception("agent roster lookup failed")
            raise StoreError("Error loading agents") from e
        if not agents:
            raise NoAgentsError("No active agents found. Please add agents first.")

        distributions = distribute(records, agents)
    except ListIngestError as e:
        log.warning("list ingest rejected: file_name=%s reason=%s", file_name, e.detail)
        raise

    contact_list = await persist_list(
        db,
        file_name=file_name,
        uploaded_by=uploaded_by,
        distributions=distributions,
    )
    log.info(
        "list ingested: list_id=%s file_name=%s total_items=%d agents=%d dropped=%d",
        contact_list.id, file_name, contact_list.total_items, len(agents), len(candidates) - len(records),
    )
    return IngestResult(contact_list=contact_list, agents=list(agents))
