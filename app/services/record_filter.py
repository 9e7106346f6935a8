from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from app.services.record_parser import CandidateRecord


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidRecord:
    first_name: str
    phone: str
    notes: str = ""

    def as_item(self) -> dict[str, str]:
        return {"first_name": self.first_name, "phone": self.phone, "notes": self.notes}


def is_valid(candidate: CandidateRecord) -> bool:
    return bool((candidate.first_name or "").strip()) and bool((candidate.phone or "").strip())


def filter_valid_records(candidates: Iterable[CandidateRecord]) -> list[ValidRecord]:
    """
    Keep rows with a non-empty name and phone, in input order.
    Invalid rows are dropped silently; only "nothing left" is an error, and
    that is decided by the caller.
    """
    valid: list[ValidRecord] = []
    dropped = 0
    for c in candidates:
        if not is_valid(c):
            dropped += 1
            continue
        valid.append(ValidRecord(
            first_name=c.first_name.strip(),
            phone=c.phone.strip(),
            notes=(c.notes or "").strip(),
        ))

    if dropped:
        log.debug("dropped %d invalid rows (kept %d)", dropped, len(valid))
    return valid
