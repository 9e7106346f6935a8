from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from app.services.list_errors import NoAgentsError
from app.services.record_filter import ValidRecord


class RosterAgent(Protocol):
    id: str


@dataclass(frozen=True)
class Distribution:
    """One agent's contiguous slice of an upload."""
    agent_id: str
    items: tuple[ValidRecord, ...]
    item_count: int


def slice_sizes(n: int, k: int) -> list[int]:
    """
    Remainder-aware split of n items over k slots.
    The first n % k slots get one extra item: slice_sizes(7, 3) == [3, 2, 2].
    """
    if k <= 0:
        raise NoAgentsError("No active agents found. Please add agents first.")
    base, remainder = divmod(n, k)
    return [base + 1 if i < remainder else base for i in range(k)]


def distribute(records: Sequence[ValidRecord], agents: Sequence[RosterAgent]) -> list[Distribution]:
    """
    Partition records across agents in roster order.

    Slices are contiguous and non-overlapping, so concatenating every
    distribution's items in roster order gives back `records` exactly.
    An empty record sequence yields one empty distribution per agent.
    """
    sizes = slice_sizes(len(records), len(agents))

    distributions: list[Distribution] = []
    offset = 0
    for agent, size in zip(agents, sizes):
        chunk = tuple(records[offset:offset + size])
        distributions.append(Distribution(agent_id=agent.id, items=chunk, item_count=len(chunk)))
        offset += size
    return distributions
