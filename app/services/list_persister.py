from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact_list import ContactList, ListDistribution
from app.services.audit import audit
from app.services.distributor import Distribution
from app.services.list_errors import StoreError


log = logging.getLogger(__name__)


async def persist_list(
    db: AsyncSession,
    *,
    file_name: str,
    uploaded_by: str,
    distributions: Sequence[Distribution],
) -> ContactList:
    """
    Store one upload (header + every distribution) in a single commit.

    total_items is computed here and stored; readers never recompute it.
    On any database failure the transaction is rolled back so no partial
    list is ever visible, and StoreError is raised.
    """
    for d in distributions:
        if d.item_count != len(d.items):
            raise StoreError(f"item_count mismatch for agent {d.agent_id}: {d.item_count} != {len(d.items)}")

    total_items = sum(d.item_count for d in distributions)

    contact_list = ContactList(
        file_name=file_name,
        total_items=total_items,
        uploaded_by=uploaded_by,
        distributions=[
            ListDistribution(
                position=position,
                agent_id=d.agent_id,
                items=[r.as_item() for r in d.items],
                item_count=d.item_count,
            )
            for position, d in enumerate(distributions)
        ],
    )

    try:
        db.add(contact_list)
        await db.flush()  # assigns contact_list.id for the audit row
        audit(
            db,
            actor_api_key_id=uploaded_by,
            action="list.created",
            target_type="list",
            target_id=contact_list.id,
            detail={
                "file_name": file_name,
                "total_items": total_items,
                "item_counts": [d.item_count for d in distributions],
            },
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        log.exception("persist list failed: file_name=%s", file_name)
        raise StoreError("Error saving distributed list") from e

    return contact_list
